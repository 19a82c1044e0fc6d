from typing import Any, Dict, List

MODEL = "gpt-4"

SYSTEM_INSTRUCTION = (
    "Tu es un expert en communication sur les réseaux sociaux. "
    "Tu dois optimiser le message fourni pour le rendre plus engageant, tout en gardant son essence. "
    "Ajoute des hashtags pertinents à la fin."
)


def build_messages(text: str) -> List[Dict[str, str]]:
    """System instruction first, then the user's answer exactly as received."""
    return [
        {"role": "system", "content": SYSTEM_INSTRUCTION},
        {"role": "user", "content": text},
    ]


def build_payload(text: str, model: str = MODEL) -> Dict[str, Any]:
    return {"model": model, "messages": build_messages(text)}
