"""Fixed reply texts sent by the bot."""

WELCOME_MESSAGE = "Welcome new user, please fill out your profile information."
COMPLETION_TEMPLATE = "Thank you, {name}. Your profile is complete."

GREETING_TOKEN = "hi"
GREETING_TEMPLATE = "Hi. {name}."
FALLBACK_GREETING = "Hi. I'm the Contoso cafe bot."


def completion_message(name: str | None) -> str:
    return COMPLETION_TEMPLATE.format(name=name or "")


def greeting_message(name: str | None) -> str:
    return GREETING_TEMPLATE.format(name=name or "")


def is_greeting(text: str) -> bool:
    """Whether the text is exactly the greeting token, ignoring case and padding."""
    return text.strip().casefold() == GREETING_TOKEN
