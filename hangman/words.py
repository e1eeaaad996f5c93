"""
Word list for hangman.
"""

from typing import NamedTuple


class WordEntry(NamedTuple):
    word: str
    hint: str
    category: str


WORDS_WITH_HINTS = (
    WordEntry("REACT", "Popular JavaScript library for building user interfaces", "Technology"),
    WordEntry("JAVASCRIPT", "Programming language that runs in web browsers", "Technology"),
    WordEntry("HANGMAN", "Classic word guessing game you are playing right now", "Games"),
    WordEntry("CODING", "The process of writing computer programs", "Technology"),
    WordEntry("PUZZLE", "A problem or game that challenges your thinking", "Games"),
    WordEntry("GAME", "An activity done for entertainment or fun", "Entertainment"),
    WordEntry("DEVELOPER", "A person who creates software applications", "Careers"),
    WordEntry("PROGRAMMING", "The art of instructing computers what to do", "Technology"),
)
