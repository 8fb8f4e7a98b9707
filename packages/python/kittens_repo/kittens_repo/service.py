from __future__ import annotations

from loguru import logger

from .models import Kitten


def greeting(kitten: Kitten) -> str:
    if kitten.name and kitten.name.strip():
        return f"Meow name is {kitten.name}"
    return "I Dont have a name"


def speak(kitten: Kitten) -> str:
    message = greeting(kitten)
    logger.info(message)
    return message
