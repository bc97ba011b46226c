"""
Support Resources

Keyword-driven follow-up suggestions and resource links attached to
every chat reply, including crisis contacts when the student's message
mentions harm.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SupportResource:
    """
    A resource link shown under a chat reply.

    Attributes:
        title: Display title
        url: Link or contact URI (sms:, tel:, #anchor)
        resource_type: article, video, exercise or contact
    """

    title: str
    url: str
    resource_type: str

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "url": self.url,
            "type": self.resource_type,
        }


BREATHING_EXERCISE = SupportResource("Anxiety Relief Breathing Exercise", "#breathing-exercise", "exercise")
SLEEP_GUIDE = SupportResource("Better Sleep Guide for Students", "#sleep-guide", "article")
RELATIONSHIPS_GUIDE = SupportResource("Building Healthy Relationships", "#social-skills", "article")
CRISIS_TEXT_LINE = SupportResource("Crisis Text Line", "sms:741741", "contact")
SUICIDE_PREVENTION_LIFELINE = SupportResource("National Suicide Prevention Lifeline", "tel:988", "contact")

# (trigger words, resources) in display order
_RESOURCE_RULES: tuple[tuple[tuple[str, ...], tuple[SupportResource, ...]], ...] = (
    (("anxious", "panic"), (BREATHING_EXERCISE,)),
    (("sleep", "tired"), (SLEEP_GUIDE,)),
    (("friend", "social"), (RELATIONSHIPS_GUIDE,)),
    (("hurt", "harm", "end", "hopeless"), (CRISIS_TEXT_LINE, SUICIDE_PREVENTION_LIFELINE)),
)

# First matching rule wins
_SUGGESTION_RULES: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (
        ("anxious", "worry"),
        (
            "Can you tell me what's making you anxious?",
            "Would you like to try a breathing exercise?",
            "What usually helps when you feel this way?",
        ),
    ),
    (
        ("sad", "down"),
        (
            "I'm here to listen. What's been going on?",
            "Would talking to someone help?",
            "What's one small thing that might make you feel better?",
        ),
    ),
    (
        ("stress", "overwhelmed"),
        (
            "What's causing the most stress right now?",
            "Can we break this down into smaller parts?",
            "What support do you have available?",
        ),
    ),
)

DEFAULT_SUGGESTIONS = (
    "Tell me more about that",
    "How are you feeling about everything?",
    "What would be most helpful right now?",
)


def suggestions_for(message: str) -> list[str]:
    text = message.lower()
    for triggers, suggestions in _SUGGESTION_RULES:
        if any(trigger in text for trigger in triggers):
            return list(suggestions)
    return list(DEFAULT_SUGGESTIONS)


def resources_for(message: str) -> list[SupportResource]:
    """All resources whose trigger words appear in the message."""
    text = message.lower()
    resources: list[SupportResource] = []
    for triggers, matched in _RESOURCE_RULES:
        if any(trigger in text for trigger in triggers):
            resources.extend(matched)
    return resources
