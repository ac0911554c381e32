"""
Penalty loop - in-session remediation rules.

A word mastered on its first presentation leaves the queue immediately. A
word that is ever judged FORGOT or UNCERTAIN enters the penalty loop and must
collect PENALTY_STREAK_TARGET consecutive MASTERED judgments before it leaves;
any slip resets its streak to 0.

Per word, within one sitting:

    Unseen --MASTERED--> Exited
    Unseen --other-----> Penalty(0)
    Penalty(k) --MASTERED--> Penalty(k+1) if k+1 < 3 else Exited
    Penalty(k) --other-----> Penalty(0)
"""

from __future__ import annotations

from core.session.state import SessionState
from core.srs.constants import PENALTY_STREAK_TARGET, Judgment


def _take_from_queue(queue: list[str], word_id: str) -> None:
    # The word being judged is normally the head; fall back to first occurrence
    if queue and queue[0] == word_id:
        queue.pop(0)
    else:
        queue.remove(word_id)


def apply_judgment_to_queue(
    state: SessionState,
    word_id: str,
    judgment: Judgment
) -> bool:
    """
    Update queue order and streaks after a judgment (modifies state in place).

    Rules:
    - MASTERED, never failed: remove from queue
    - MASTERED, in penalty loop: streak + 1; remove at target, else to the tail
    - FORGOT / UNCERTAIN: streak = 0, move to the tail

    Args:
        state: Working copy of the session state
        word_id: Word being judged; must be in the queue
        judgment: Recall judgment

    Returns:
        True if the word exited the queue for this sitting
    """
    _take_from_queue(state.queue, word_id)

    if judgment == Judgment.MASTERED:
        if word_id not in state.learning_streaks:
            return True

        streak = state.learning_streaks[word_id] + 1
        state.learning_streaks[word_id] = streak
        if streak >= PENALTY_STREAK_TARGET:
            return True

        state.queue.append(word_id)
        return False

    state.learning_streaks[word_id] = 0
    state.queue.append(word_id)
    return False
