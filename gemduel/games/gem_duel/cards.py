"""
Card definitions - Development cards and the Royal Court.

Templates are compact tuples; build_deck() instantiates them into Card
objects with match-unique ids. A "gold" bonus marks a joker card whose
bonus colour is chosen by the buyer.
"""

from __future__ import annotations

from ...engine_core.state import Ability, Card, RoyalCard

A, S, B, R = Ability.AGAIN, Ability.STEAL, Ability.BONUS_GEM, Ability.SCROLL

# (template_id, cost, points, crowns, bonus_color, bonus_count, abilities)
CARD_TEMPLATES: dict[int, list[tuple]] = {
    1: [
        ("l1-01", {"blue": 2, "white": 1}, 0, 0, "black", 1, (B,)),
        ("l1-02", {"red": 3}, 0, 1, "white", 1, ()),
        ("l1-03", {"green": 2, "pearl": 1}, 1, 0, "blue", 1, ()),
        ("l1-04", {"white": 2, "black": 2}, 0, 0, "red", 1, (A,)),
        ("l1-05", {"black": 3}, 0, 1, "green", 1, ()),
        ("l1-06", {"blue": 1, "green": 1, "red": 1}, 0, 0, "white", 1, (S,)),
        ("l1-07", {"white": 3}, 0, 0, "blue", 1, (R,)),
        ("l1-08", {"red": 2, "green": 2}, 1, 0, "black", 1, ()),
        ("l1-09", {"blue": 2, "black": 1, "pearl": 1}, 0, 0, "gold", 1, ()),
        ("l1-10", {"green": 3}, 0, 1, "red", 1, ()),
        ("l1-11", {"white": 1, "blue": 1, "black": 1}, 0, 0, "green", 1, (B,)),
        ("l1-12", {"red": 2, "white": 2}, 1, 0, "blue", 1, ()),
        ("l1-13", {"black": 2, "green": 1}, 0, 0, "white", 1, (A,)),
        ("l1-14", {"blue": 3}, 0, 1, "black", 1, ()),
        ("l1-15", {"green": 2, "red": 1, "white": 1}, 0, 0, "gold", 1, ()),
    ],
    2: [
        ("l2-01", {"blue": 4, "white": 2}, 1, 0, "black", 2, ()),
        ("l2-02", {"red": 3, "pearl": 1}, 1, 2, "white", 1, ()),
        ("l2-03", {"green": 4, "black": 2}, 2, 0, "blue", 1, (R,)),
        ("l2-04", {"white": 3, "red": 2}, 2, 0, "red", 1, (S,)),
        ("l2-05", {"black": 4, "pearl": 1}, 1, 0, "green", 2, ()),
        ("l2-06", {"blue": 2, "green": 2, "red": 2}, 2, 1, "white", 1, ()),
        ("l2-07", {"white": 5}, 2, 0, "blue", 1, (A,)),
        ("l2-08", {"red": 4, "green": 2}, 1, 2, "black", 1, ()),
        ("l2-09", {"blue": 3, "black": 2, "pearl": 1}, 2, 0, "gold", 1, ()),
        ("l2-10", {"green": 5}, 2, 0, "red", 1, (B,)),
        ("l2-11", {"white": 2, "blue": 2, "black": 2}, 1, 1, "green", 1, ()),
        ("l2-12", {"red": 5, "pearl": 1}, 3, 0, "blue", 1, ()),
    ],
    3: [
        ("l3-01", {"blue": 6, "pearl": 1}, 4, 0, "black", 1, ()),
        ("l3-02", {"red": 5, "white": 3}, 3, 3, "white", 1, ()),
        ("l3-03", {"green": 6, "black": 2}, 5, 0, "blue", 1, ()),
        ("l3-04", {"white": 5, "blue": 3, "pearl": 1}, 3, 0, "gold", 1, (A,)),
        ("l3-05", {"black": 6, "red": 2}, 4, 2, "green", 1, ()),
        ("l3-06", {"blue": 3, "green": 3, "red": 3}, 6, 0, "red", 1, ()),
        ("l3-07", {"white": 7}, 3, 3, "blue", 1, ()),
        ("l3-08", {"red": 6, "pearl": 1}, 4, 0, "white", 1, (R,)),
    ],
}

del A, S, B, R

ROYAL_CARDS: tuple[RoyalCard, ...] = (
    RoyalCard(id="royal-1", points=2, abilities=(Ability.STEAL,), label="The Thief"),
    RoyalCard(id="royal-2", points=2, abilities=(Ability.SCROLL,), label="The Scholar"),
    RoyalCard(id="royal-3", points=2, abilities=(Ability.AGAIN,), label="The Regent"),
    RoyalCard(id="royal-4", points=3, label="The Monarch"),
)


def card_from_template(template: tuple, level: int, instance_id: str | None = None) -> Card:
    template_id, cost, points, crowns, bonus_color, bonus_count, abilities = template
    return Card(
        id=instance_id or template_id,
        level=level,
        cost=dict(cost),
        points=points,
        crowns=crowns,
        bonus_color=bonus_color,
        bonus_count=bonus_count,
        abilities=tuple(abilities),
        template_id=template_id,
    )


def build_deck(level: int) -> list[Card]:
    """Instantiate every template of one level, in table order (unshuffled)."""
    return [
        card_from_template(t, level, instance_id=f"{t[0]}#{n}")
        for n, t in enumerate(CARD_TEMPLATES[level])
    ]


TEMPLATES_BY_ID: dict[str, tuple[int, tuple]] = {
    t[0]: (level, t) for level, templates in CARD_TEMPLATES.items() for t in templates
}
