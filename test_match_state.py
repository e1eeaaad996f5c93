"""
Tests for the match state machine.
"""

import threading

import pytest

from conftest import FailingCounter, FailingLog
from logic.ai_player import AIPlayer, Difficulty
from logic.game_state import Board, Mark, MatchMode, Outcome
from match_control.match_state import MatchPhase, MatchScore, MatchStateMachine
from reporting.match_log import MatchRecord
from reporting.result_reporter import ResultReporter


X, O = Mark.X, Mark.O


class ScriptedEngine:
    """Plays a fixed list of moves for O."""

    def __init__(self, moves):
        self.player = O
        self.moves = list(moves)
        self.calls = 0

    def choose_move(self, board, difficulty):
        self.calls += 1
        return self.moves.pop(0) if self.moves else None


def _two_player(config, reporter, scheduler=None):
    match = MatchStateMachine(config=config, mode=MatchMode.LOCAL_2P, reporter=reporter, scheduler=scheduler)
    match.set_player_names("Ann", "Bob")
    return match


def _play(match, positions):
    for position in positions:
        assert match.submit_move(position), f"move {position} rejected"


# ==================== CPU MODE ====================

def test_hard_cpu_answers_corner_with_center(config, reporter):
    match = MatchStateMachine(config=config, difficulty=Difficulty.HARD, reporter=reporter)
    assert match.phase == MatchPhase.ROUND_IN_PROGRESS

    assert match.submit_move(0)

    assert match.board == Board.from_string("X...O....")
    assert match.step == 2
    assert len(match.history) == 3
    assert match.current_turn == X
    assert match.status_text == "Your turn"


def test_board_locked_while_cpu_thinks(config, reporter, scheduler):
    config.THINK_DELAY_MS = 280
    match = MatchStateMachine(config=config, difficulty=Difficulty.HARD, reporter=reporter, scheduler=scheduler)

    match.submit_move(0)
    assert match.is_locked
    assert match.status_text == "CPU is thinking..."
    assert scheduler.pending[0][0] == 280
    assert not match.submit_move(8)

    assert scheduler.run_pending() == 1
    assert not match.is_locked
    assert match.board[4] == O
    assert match.submit_move(8)


def test_pending_cpu_move_dropped_after_new_round(config, reporter, scheduler):
    engine = ScriptedEngine([4])
    match = MatchStateMachine(config=config, engine=engine, reporter=reporter, scheduler=scheduler)

    match.submit_move(0)
    match.start_round()
    scheduler.run_pending()

    assert match.board.is_empty
    assert engine.calls == 0
    assert not match.is_locked
    assert match.submit_move(4)


def test_pending_cpu_move_dropped_after_restart(config, reporter, scheduler):
    engine = ScriptedEngine([4])
    match = MatchStateMachine(config=config, engine=engine, reporter=reporter, scheduler=scheduler)

    match.submit_move(0)
    match.restart_match()
    scheduler.run_pending()

    assert match.board.is_empty
    assert engine.calls == 0


def test_cpu_starts_when_start_player_is_cpu(config, reporter):
    engine = ScriptedEngine([4, 8])
    match = MatchStateMachine(config=config, engine=engine, start_player=O, reporter=reporter)

    assert match.board == Board.from_string("....O....")
    assert match.current_turn == X

    match.set_start_player(O)
    assert match.board == Board.from_string("........O")


def test_cpu_win_is_scored_and_reported(config, reporter, counter):
    engine = ScriptedEngine([3, 4, 5])
    match = MatchStateMachine(config=config, engine=engine, reporter=reporter)

    _play(match, [0, 1, 8])

    assert match.outcome == Outcome.O_WINS
    assert match.winning_line == (3, 4, 5)
    assert match.phase == MatchPhase.ROUND_ENDED
    assert match.current_turn == O
    assert match.status_text == "CPU (O) wins!"
    assert match.score == MatchScore(0, 1, 0)
    assert counter.calls == ["ticTacToe"]


def test_cpu_mode_does_not_log_matches(config, reporter, match_log):
    engine = ScriptedEngine([3, 4])
    match = MatchStateMachine(config=config, engine=engine, reporter=reporter)

    _play(match, [0, 1, 2])

    assert match.outcome == Outcome.X_WINS
    assert match.status_text == "You (X) wins!"
    assert match_log.records == []


def test_no_moves_after_round_ended(config, reporter):
    engine = ScriptedEngine([3, 4])
    match = MatchStateMachine(config=config, engine=engine, reporter=reporter)
    _play(match, [0, 1, 2])

    assert not match.submit_move(8)
    assert match.board[8] is None


def test_illegal_moves_are_ignored(config, reporter):
    match = MatchStateMachine(config=config, engine=ScriptedEngine([4]), reporter=reporter)
    match.submit_move(0)

    assert not match.submit_move(0)
    assert not match.submit_move(4)
    assert not match.submit_move(9)
    assert match.step == 2


# ==================== TWO PLAYER MODE ====================

def test_two_player_needs_names(config, reporter):
    match = MatchStateMachine(config=config, mode=MatchMode.LOCAL_2P, reporter=reporter)

    assert match.phase == MatchPhase.AWAITING_NAMES
    assert not match.submit_move(0)
    with pytest.raises(ValueError):
        match.set_player_names("Ann", "  ")

    assert match.set_player_names(" Ann ", "Bob")
    assert match.phase == MatchPhase.ROUND_IN_PROGRESS
    assert match.player_names == ("Ann", "Bob")
    assert match.status_text == "Ann's turn"

    assert not match.set_player_names("Carl", "Dee")
    assert match.x_label == "Ann"


def test_names_only_in_two_player_mode(config, reporter):
    match = MatchStateMachine(config=config, reporter=reporter)
    with pytest.raises(ValueError):
        match.set_player_names("Ann", "Bob")


def test_x_wins_top_row(config, reporter, counter, match_log):
    match = _two_player(config, reporter)

    _play(match, [0, 3, 1, 4, 2])

    assert match.outcome == Outcome.X_WINS
    assert match.winning_line == (0, 1, 2)
    assert match.status_text == "Ann wins!"
    assert match.score == MatchScore(1, 0, 0)
    assert counter.calls == ["ticTacToe"]
    assert len(match_log.records) == 1
    record = match_log.records[0]
    assert isinstance(record, MatchRecord)
    assert (record.x_name, record.o_name, record.winner, record.mode) == ("Ann", "Bob", "X", "local-2p")
    assert record.uid == "user-1"


def test_draw_is_scored_but_not_counted_as_win(config, reporter, counter, match_log):
    match = _two_player(config, reporter)

    _play(match, [0, 1, 2, 4, 3, 5, 7, 6, 8])

    assert match.board == Board.from_string("XOXXOOOXX")
    assert match.outcome == Outcome.DRAW
    assert match.status_text == "Draw!"
    assert match.score == MatchScore(0, 0, 1)
    assert counter.calls == []
    assert match_log.records[0].winner == "draw"


def test_new_round_keeps_score(config, reporter):
    match = _two_player(config, reporter)
    _play(match, [0, 3, 1, 4, 2])

    match.start_round()

    assert match.phase == MatchPhase.ROUND_IN_PROGRESS
    assert match.board.is_empty
    assert match.history == [Board.empty()]
    assert match.score.x_wins == 1
    _play(match, [0, 3, 1, 4, 2])
    assert match.score.x_wins == 2


# ==================== HISTORY ====================

def test_jump_back_then_move_discards_future(config, reporter):
    match = _two_player(config, reporter)
    _play(match, [0, 4, 8])

    match.jump_to_move(1)
    assert match.board == Board.from_string("X........")
    assert match.current_turn == O
    assert len(match.history) == 4

    assert match.submit_move(2)
    assert match.step == 2
    assert match.history == [
        Board.empty(),
        Board.from_string("X........"),
        Board.from_string("X.O......"),
    ]


def test_jump_to_finished_snapshot_does_not_rescore(config, reporter, counter, match_log):
    match = _two_player(config, reporter)
    _play(match, [0, 3, 1, 4, 2])

    match.jump_to_move(2)
    assert match.phase == MatchPhase.ROUND_IN_PROGRESS
    assert match.outcome == Outcome.IN_PROGRESS
    assert match.winning_line is None

    match.jump_to_move(5)
    assert match.phase == MatchPhase.ROUND_ENDED
    assert match.outcome == Outcome.X_WINS
    assert match.current_turn == X
    assert match.winning_line == (0, 1, 2)

    assert match.score == MatchScore(1, 0, 0)
    assert counter.calls == ["ticTacToe"]
    assert len(match_log.records) == 1


def test_replaying_to_a_new_end_after_jump_is_not_rescored(config, reporter, counter):
    match = _two_player(config, reporter)
    _play(match, [0, 3, 1, 4, 2])

    match.jump_to_move(4)
    _play(match, [6, 5])

    assert match.outcome == Outcome.O_WINS
    assert match.phase == MatchPhase.ROUND_ENDED
    assert match.score == MatchScore(1, 0, 0)
    assert counter.calls == ["ticTacToe"]


def test_jump_to_cpu_turn_triggers_cpu(config, reporter):
    match = MatchStateMachine(config=config, difficulty=Difficulty.HARD, reporter=reporter)
    match.submit_move(0)

    match.jump_to_move(1)

    assert match.board == Board.from_string("X...O....")
    assert match.step == 2
    assert len(match.history) == 3


def test_jump_drops_pending_cpu_move(config, reporter, scheduler):
    engine = ScriptedEngine([4, 8])
    match = MatchStateMachine(config=config, engine=engine, reporter=reporter, scheduler=scheduler)
    match.submit_move(0)

    match.jump_to_move(0)
    assert not match.is_locked
    scheduler.run_pending()

    assert match.board.is_empty
    assert engine.calls == 0


def test_jump_out_of_range(config, reporter):
    match = MatchStateMachine(config=config, reporter=reporter)
    with pytest.raises(IndexError):
        match.jump_to_move(1)


# ==================== RESTART & SETTINGS ====================

def test_restart_match_zeroes_score_and_history(config, reporter):
    match = _two_player(config, reporter)
    _play(match, [0, 4])
    match.score = MatchScore(3, 1, 2)

    match.restart_match()

    assert match.score == MatchScore(0, 0, 0)
    assert match.history == [Board.empty()]
    assert match.step == 0
    assert match.phase == MatchPhase.AWAITING_NAMES
    assert not match.names_locked


def test_restart_in_cpu_mode_starts_round(config, reporter):
    match = MatchStateMachine(config=config, engine=ScriptedEngine([4]), reporter=reporter)
    match.submit_move(0)
    match.score = MatchScore(3, 1, 2)

    match.restart_match()

    assert match.score == MatchScore(0, 0, 0)
    assert match.history == [Board.empty()]
    assert match.phase == MatchPhase.ROUND_IN_PROGRESS


def test_switching_modes(config, reporter):
    match = MatchStateMachine(config=config, engine=ScriptedEngine([4]), reporter=reporter)
    match.submit_move(0)

    match.set_mode(MatchMode.LOCAL_2P)
    assert match.phase == MatchPhase.AWAITING_NAMES
    assert match.board.is_empty
    assert match.status_text == "Enter player names to start"

    match.set_mode(MatchMode.VS_CPU)
    assert match.phase == MatchPhase.ROUND_IN_PROGRESS
    assert match.x_label == "You (X)"


def test_set_difficulty_accepts_names(config, reporter):
    match = MatchStateMachine(config=config, reporter=reporter)
    match.set_difficulty("hard")
    assert match.difficulty == Difficulty.HARD
    with pytest.raises(ValueError):
        match.set_difficulty("brutal")


# ==================== FINALIZATION ====================

def test_finalize_is_a_noop_while_in_progress(config, reporter, counter):
    match = MatchStateMachine(config=config, reporter=reporter)
    assert not match.finalize_round()
    assert counter.calls == []


def test_finalize_runs_once_when_called_again(config, reporter, counter, match_log):
    match = _two_player(config, reporter)
    _play(match, [0, 3, 1, 4, 2])

    assert not match.finalize_round()
    assert not match.finalize_round()

    assert match.score == MatchScore(1, 0, 0)
    assert counter.calls == ["ticTacToe"]
    assert len(match_log.records) == 1


def test_concurrent_finalize_fires_once(config, reporter, counter, match_log):
    match = _two_player(config, reporter)
    match.round.board = Board.from_string("XXXOO....")

    barrier = threading.Barrier(2)
    results = []

    def finalize():
        barrier.wait()
        results.append(match.finalize_round())

    threads = [threading.Thread(target=finalize) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(results) == [False, True]
    assert match.score == MatchScore(1, 0, 0)
    assert counter.calls == ["ticTacToe"]
    assert len(match_log.records) == 1


def test_collaborator_failures_do_not_change_outcome(config):
    failing_counter = FailingCounter()
    failing_log = FailingLog()
    reporter = ResultReporter(win_counter=failing_counter, match_log=failing_log)
    match = _two_player(config, reporter)

    _play(match, [0, 3, 1, 4, 2])

    assert match.outcome == Outcome.X_WINS
    assert match.score == MatchScore(1, 0, 0)
    assert failing_counter.attempts == 1
    assert failing_log.attempts == 1


def test_hard_cpu_full_rounds_never_lose(config, reporter):
    # The human always takes the lowest free cell
    match = MatchStateMachine(
        config=config,
        difficulty=Difficulty.HARD,
        engine=AIPlayer(O),
        reporter=reporter
    )
    for _ in range(3):
        while match.phase == MatchPhase.ROUND_IN_PROGRESS:
            match.submit_move(match.board.get_empty_cells()[0])
        assert match.outcome in (Outcome.O_WINS, Outcome.DRAW)
        match.start_round()
    assert match.score.x_wins == 0
