"""Narrative engine: ranked news stories for a finished dual."""

from __future__ import annotations

from dataclasses import dataclass, field

from models.models import DualOutcome, WinMethod, WinnerSide
from simulation.entities import DualResult, Team
from simulation.match_engine import overall_score

_UPSET_RATING_GAP = 50
_BLOWOUT_MARGIN = 15
_CLUTCH_MARGIN = 3
_INDIVIDUAL_UPSET_GAP = -8
_MAX_STORIES = 5


@dataclass
class DualStory:
    type: str
    importance: float
    headline: str
    blurb: str
    tags: list[str] = field(default_factory=list)


def generate_dual_stories(
    my_team: Team,
    rival: Team,
    result: DualResult,
    outcome: DualOutcome,
    my_rating: float,
    rival_rating: float,
    is_postseason: bool = False,
) -> list[DualStory]:
    """Top stories for a dual, most important first."""
    stories: list[DualStory] = []
    margin = abs(result.score_a - result.score_b)
    rating_diff = my_rating - rival_rating

    # Team-level
    if outcome is DualOutcome.WIN and rating_diff < -_UPSET_RATING_GAP:
        stories.append(DualStory(
            type="team_upset",
            importance=100 + abs(rating_diff),
            headline=f"{my_team.name} shocks {rival.name}",
            blurb=(
                f"{my_team.name} toppled a higher-rated {rival.name} squad by "
                f"{result.score_a}-{result.score_b}"
                + (" in postseason action." if is_postseason else ".")
            ),
            tags=["team", "upset"],
        ))
    elif outcome is DualOutcome.LOSS and rating_diff > _UPSET_RATING_GAP:
        stories.append(DualStory(
            type="team_upset",
            importance=90 + abs(rating_diff),
            headline=f"{rival.name} stuns {my_team.name}",
            blurb=(
                f"{rival.name} capitalized on mistakes to win "
                f"{result.score_b}-{result.score_a}"
                + (" and advance." if is_postseason else ".")
            ),
            tags=["team", "upset"],
        ))

    blowout = margin >= _BLOWOUT_MARGIN
    if blowout:
        leader = my_team.name if result.score_a > result.score_b else rival.name
        stories.append(DualStory(
            type="blowout",
            importance=70 + margin,
            headline=f"{leader} rolls in blowout",
            blurb=f"The dual was never in doubt as the margin hit {margin} points.",
            tags=["blowout"],
        ))
    elif margin <= _CLUTCH_MARGIN:
        verb = "escaped" if outcome is DualOutcome.WIN else "fell"
        stories.append(DualStory(
            type="clutch_match",
            importance=65,
            headline="Decided in the final bouts",
            blurb=f"{my_team.name} {verb} {result.score_a}-{result.score_b} after a nail-biter finish.",
            tags=["clutch"],
        ))

    # Individual bouts
    for bout in result.bouts:
        if bout.is_forfeit:
            continue
        mine_won = bout.winner_side is WinnerSide.A
        winner, loser = (bout.a, bout.b) if mine_won else (bout.b, bout.a)
        gap = overall_score(winner) - overall_score(loser)
        wc = int(bout.weight_class)
        if gap < _INDIVIDUAL_UPSET_GAP:
            stories.append(DualStory(
                type="individual_upset",
                importance=55 + abs(gap),
                headline=f"Upset at {wc} lbs",
                blurb=f"{winner.name} shocked {loser.name} with a {bout.method.value} at {wc}.",
                tags=[winner.name, loser.name, str(wc), "my_team" if mine_won else "rival"],
            ))
        elif bout.method in (WinMethod.PIN, WinMethod.TECH_FALL):
            team = my_team.name if mine_won else rival.name
            stories.append(DualStory(
                type="star_dominated",
                importance=40 + (8 if bout.method is WinMethod.PIN else 5),
                headline=f"{winner.name} dominates at {wc}",
                blurb=f"{winner.name} earned a {bout.method.value} to give {team} bonus points.",
                tags=[winner.name, str(wc)],
            ))

    if not stories:
        verb = {
            DualOutcome.WIN: "edges",
            DualOutcome.LOSS: "falls to",
            DualOutcome.TIE: "splits with",
        }[outcome]
        stories.append(DualStory(
            type="default",
            importance=10,
            headline=f"{my_team.name} {verb} {rival.name}",
            blurb=f"Final score {result.score_a}-{result.score_b}.",
        ))

    stories.sort(key=lambda s: s.importance, reverse=True)
    return stories[:_MAX_STORIES]
