"""
Setlist Source: ask a hosted LLM for a fictional setlist and a hype caption.

Both calls degrade instead of raising. A failed or malformed setlist
response becomes an empty setlist, and a failed caption becomes
FALLBACK_CAPTION. Errors are logged, never surfaced to the caller.
"""

import json
import logging
import os
from typing import Any, List, Optional

from openai import OpenAI, OpenAIError

from ..models import InvalidParamsError, Setlist, SetlistParams, Track, setlist_duration_seconds
from .prompts import SYSTEM_PROMPT, setlist_prompt, vibe_prompt

logger = logging.getLogger(__name__)

FALLBACK_CAPTION = "Getting the party started..."

# Keys JSON mode tends to wrap the track array in
PAYLOAD_ARRAY_KEYS = ("tracks", "setlist", "songs")


class SetlistPayloadError(ValueError):
    """Raised when an LLM response does not have the setlist shape."""
    pass


def parse_setlist_payload(text: Optional[str]) -> Setlist:
    """
    Parse a setlist response body.

    Accepts a bare JSON array of track objects, or an object holding that
    array under one of PAYLOAD_ARRAY_KEYS. Blank text is an empty setlist.

    Args:
        text: Raw response text

    Returns:
        Tuple of Track in play order

    Raises:
        SetlistPayloadError: If the text is not JSON of the expected shape or
            any track record fails validation
    """
    text = (text or "").strip()
    if not text:
        return ()

    try:
        payload = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        raise SetlistPayloadError(f"Response is not valid JSON: {e}")

    if isinstance(payload, dict):
        items = next(
            (payload[key] for key in PAYLOAD_ARRAY_KEYS if isinstance(payload.get(key), list)),
            None,
        )
        if items is None:
            raise SetlistPayloadError(
                f"Response object has no track array (keys: {sorted(payload)})"
            )
    elif isinstance(payload, list):
        items = payload
    else:
        raise SetlistPayloadError(f"Expected a JSON array, got {type(payload).__name__}")

    tracks: List[Track] = []
    for position, item in enumerate(items):
        try:
            tracks.append(Track.from_dict(item))
        except InvalidParamsError as e:
            raise SetlistPayloadError(f"Track {position} is invalid: {e}")
    return tuple(tracks)


class SetlistSource:
    """Chat-completions client for setlists and captions."""

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key_env: str = "OPENAI_API_KEY",
        timeout_seconds: float = 30,
        temperature: float = 0.9,
        client: Any = None,
    ):
        """
        Args:
            model: Chat model name
            api_key_env: Environment variable holding the API key
            timeout_seconds: Per-request timeout
            temperature: Sampling temperature
            client: Pre-built OpenAI-compatible client (created lazily if None)
        """
        self.model = model
        self.api_key_env = api_key_env
        self.timeout_seconds = timeout_seconds
        self.temperature = temperature
        self._client = client

    @classmethod
    def from_config(cls, config) -> "SetlistSource":
        llm = config["llm"]
        return cls(
            model=llm.get("model", "gpt-4o-mini"),
            api_key_env=llm.get("api_key_env", "OPENAI_API_KEY"),
            timeout_seconds=llm.get("timeout_seconds", 30),
            temperature=llm.get("temperature", 0.9),
        )

    @property
    def client(self):
        if self._client is None:
            # OpenAI() raises OpenAIError when the key is missing
            self._client = OpenAI(
                api_key=os.getenv(self.api_key_env),
                timeout=self.timeout_seconds,
            )
        return self._client

    def _complete(self, prompt: str, json_mode: bool = False) -> str:
        kwargs = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=self.temperature,
            **kwargs,
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    def generate_setlist(self, params: SetlistParams) -> Setlist:
        """
        Ask the LLM for a setlist matching `params`.

        Returns:
            Tracks in play order, or () if the call or the parse failed
        """
        logger.info(
            f"Requesting setlist: scene={params.scene!r}, profile={params.music_profile!r}, "
            f"{params.duration_minutes}min, intensity={params.intensity}"
        )
        try:
            text = self._complete(setlist_prompt(params), json_mode=True)
        except OpenAIError as e:
            logger.error(f"Setlist request failed: {e}")
            return ()

        try:
            setlist = parse_setlist_payload(text)
        except SetlistPayloadError as e:
            logger.error(f"Failed to parse setlist response: {e}")
            return ()

        if not setlist:
            logger.warning("Setlist response contained no tracks")
            return setlist

        total_minutes = setlist_duration_seconds(setlist) / 60
        logger.info(
            f"✅ Setlist received: {len(setlist)} tracks, {total_minutes:.0f}min "
            f"(target {params.duration_minutes}min)"
        )
        return setlist

    def describe_vibe(self, setlist: Setlist) -> str:
        """
        Ask the LLM for a short hype caption for `setlist`.

        Returns:
            Caption text, or FALLBACK_CAPTION if there is nothing to describe
            or the call failed
        """
        if not setlist:
            return FALLBACK_CAPTION

        try:
            text = self._complete(vibe_prompt(setlist))
        except OpenAIError as e:
            logger.warning(f"Caption request failed, using fallback: {e}")
            return FALLBACK_CAPTION

        text = text.strip()
        if not text:
            logger.warning("Caption response was empty, using fallback")
            return FALLBACK_CAPTION
        return text
