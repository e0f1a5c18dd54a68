from __future__ import annotations
import logging
from typing import Optional, Sequence
import anthropic
import httpx
from pydantic import BaseModel
from recipe_pilot import demo, parser
from recipe_pilot.config import Config
from recipe_pilot.models import Recipe, RegionFilter
from recipe_pilot.store import Store, current_session

logger = logging.getLogger(__name__)


class ChatReply(BaseModel):
    text: str
    recipe: Optional[Recipe] = None
    is_live: bool = False


def _demo_reply(message: str, region: RegionFilter) -> ChatReply:
    reply = demo.respond(message, region)
    return ChatReply(text=reply.text, recipe=reply.recipe, is_live=False)


def build_messages(message: str, history: Sequence[dict], limit: int) -> list[dict]:
    turns = [
        {"role": turn["role"], "content": turn["content"]}
        for turn in history
        if turn.get("role") in ("user", "assistant") and turn.get("content")
    ]
    recent = turns[-limit:] if limit > 0 else []
    return recent + [{"role": "user", "content": message}]


def _response_text(response) -> str:
    for block in response.content:
        text = getattr(block, "text", None)
        if text:
            return text
    return ""


class ChatOrchestrator:
    def __init__(self, config: Config):
        self.config = config

    def send(
        self,
        message: str,
        region: RegionFilter,
        history: Sequence[dict],
        credential: str | None = None,
    ) -> ChatReply:
        if not credential:
            return _demo_reply(message, region)

        client = anthropic.Anthropic(
            api_key=credential,
            max_retries=0,
            timeout=self.config.request_timeout,
        )
        try:
            response = client.messages.create(
                model=self.config.anthropic_model,
                max_tokens=self.config.max_tokens,
                system=self.config.render_system_prompt(region),
                messages=build_messages(message, history, self.config.history_limit),
            )
            raw_text = _response_text(response)
        except (anthropic.APIError, httpx.HTTPError) as e:
            logger.warning("Live chat unavailable, answering in demo mode: %s", e)
            return _demo_reply(message, region)
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning("Could not read model response, answering in demo mode: %s", e)
            return _demo_reply(message, region)

        parsed = parser.parse(raw_text)
        return ChatReply(text=parsed.prose, recipe=parsed.recipe, is_live=True)


def send_message(
    store: Store,
    orchestrator: ChatOrchestrator,
    text: str,
    credential: str | None = None,
) -> ChatReply:
    """Record a user turn and the assistant's answer in the current session.

    A session is created when none is current. Concurrent calls are not
    de-duplicated; each appends its own pair of messages.
    """
    state = store.get_state()
    session = current_session(state)
    session_id = session.id if session else store.create_session()
    history = [{"role": m.role, "content": m.content} for m in (session.messages if session else [])]

    store.append_message(session_id, "user", text)
    reply = orchestrator.send(text, state.selected_region, history, credential)
    store.append_message(session_id, "assistant", reply.text, reply.recipe)
    return reply
