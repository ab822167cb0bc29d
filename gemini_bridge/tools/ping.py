from __future__ import annotations


NAME = "ping"
DESCRIPTION = "Echo a message back to check that the tool host is responding"


def make():
    async def ping(args, on_progress=None) -> str:
        message = (args or {}).get("prompt")
        return message or "Pong!"

    schema = {
        "type": "object",
        "properties": {"prompt": {"type": "string", "description": "Message to echo"}},
        "required": [],
    }
    return {NAME: schema}, {NAME: ping}
