"""Conversation state machine for chat-driven resume requests.

Each inbound message advances one user's conversation:

    initiated -> collecting_email -> collecting_job_description
              -> processing -> completed

Cancel, restart and help commands are honored at any step. States live in
a ConversationStore keyed by normalized phone; completed conversations are
deleted after a grace period and idle ones by a periodic sweep.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections import Counter
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any

from src.conversation.config import ConversationConfig, get_conversation_config
from src.conversation.models import TERMINAL_STEPS, ConversationState, ConversationStep
from src.conversation.store import ConversationStore, InMemoryConversationStore
from src.errors import NotFoundError, ValidationError
from src.messaging import messages
from src.messaging.gateway import MessagingGateway
from src.messaging.models import InboundMessage, SendResult
from src.messaging.notifier import RegistrationNotifier
from src.pipeline.service import PipelineResult, ResumePipeline
from src.profiles.models import normalize_phone

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}")
_FULL_EMAIL = re.compile(rf"^{EMAIL_PATTERN.pattern}$")
_WORD = re.compile(r"[a-z]+")

CANCEL = "cancel"
RESTART = "restart"
HELP = "help"


def is_valid_email(value: str) -> bool:
    return bool(_FULL_EMAIL.match(value.strip()))


def extract_email(text: str) -> str | None:
    """Return the single email address in ``text``, lowercased.

    Accepts a bare address or a short sentence containing exactly one
    address ("my email is ada@example.com").
    """
    stripped = text.strip()
    if is_valid_email(stripped):
        return stripped.lower()
    found = EMAIL_PATTERN.findall(stripped)
    if len(found) == 1:
        return found[0].lower()
    return None


def parse_email(text: str) -> str:
    """Return the email in ``text`` or raise ValidationError."""
    email = extract_email(text)
    if email is None:
        raise ValidationError("No single valid email address in message", field="email")
    return email


def parse_job_description(text: str, min_length: int) -> str:
    """Return the job description or raise ValidationError when it is too short."""
    if len(text) < min_length:
        raise ValidationError(
            f"Job description has {len(text)} characters, need {min_length}",
            field="job_description",
        )
    return text


class ConversationStateMachine:
    """Drives per-user conversations from inbound chat messages.

    Messages for one phone are expected in order; the machine itself keeps
    no locks. A message arriving while a resume is being generated gets a
    "still working" reply.
    """

    def __init__(
        self,
        pipeline: ResumePipeline,
        gateway: MessagingGateway,
        store: ConversationStore | None = None,
        config: ConversationConfig | None = None,
        notifier: RegistrationNotifier | None = None,
        clock: Callable[[], datetime] = datetime.now,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.pipeline = pipeline
        self.gateway = gateway
        self.config = config or get_conversation_config()
        self.store = store or InMemoryConversationStore(self.config.idle_timeout_seconds)
        self.notifier = notifier
        self._clock = clock
        self._sleep = sleep
        self._pending_deletions: dict[str, asyncio.Task] = {}
        self._sweeper: asyncio.Task | None = None

    # ------------------------------------------------------------------
    # Inbound messages
    # ------------------------------------------------------------------

    def detect_command(self, text: str) -> str | None:
        """Classify a message as cancel, restart or help.

        Only short messages are treated as commands, and email addresses are
        ignored, so a job description or "resume.writer@example.com" never
        triggers one.
        """
        if not text or len(text) >= self.config.min_job_description_length:
            return None
        words = set(_WORD.findall(EMAIL_PATTERN.sub(" ", text.lower())))
        if words & set(self.config.cancel_keywords):
            return CANCEL
        if words & set(self.config.restart_keywords):
            return RESTART
        if words & set(self.config.help_keywords):
            return HELP
        return None

    async def handle(self, message: InboundMessage) -> ConversationState | None:
        """Process one inbound message.

        Returns:
            The conversation state after the message, or None when the
            conversation ended or was removed.
        """
        phone = normalize_phone(message.identity)
        if not phone:
            logger.warning(f"Ignoring message without a usable identity: {message.identity!r}")
            return None

        text = message.text
        now = self._clock()
        state = self.store.get(phone)
        command = self.detect_command(text)

        if command == CANCEL:
            return await self._cancel(phone, state)

        if command == HELP:
            await self._send(phone, messages.help_text(self.config.min_job_description_length))
            if state is not None:
                state.touch(now)
            return state

        if command == RESTART or state is None or state.step in TERMINAL_STEPS:
            return await self._start(phone, message.display_name, now)

        state.touch(now)
        if message.display_name and not state.display_name:
            state.display_name = message.display_name

        if state.step == ConversationStep.COLLECTING_EMAIL:
            return await self._collect_email(state, text)
        if state.step == ConversationStep.COLLECTING_JOB_DESCRIPTION:
            return await self._collect_job_description(state, text)
        if state.step == ConversationStep.PROCESSING:
            await self._send(phone, messages.still_working())
            return state

        # A stored INITIATED state never got its welcome; start over
        return await self._start(phone, message.display_name, now)

    async def _start(
        self, phone: str, display_name: str | None, now: datetime
    ) -> ConversationState:
        self._discard(phone)
        state = ConversationState(phone=phone, last_activity_at=now, display_name=display_name)
        self.store.put(state)
        state.advance(ConversationStep.COLLECTING_EMAIL)
        logger.info(f"Started conversation {state.conversation_id} for {phone}")
        await self._send(phone, messages.welcome(display_name))
        return state

    async def _cancel(self, phone: str, state: ConversationState | None) -> None:
        if state is not None:
            logger.info(f"Conversation for {phone} cancelled at step {state.step.value}")
            state.step = ConversationStep.CANCELLED
        self._discard(phone)
        await self._send(phone, messages.cancelled())
        return None

    async def _collect_email(self, state: ConversationState, text: str) -> ConversationState | None:
        try:
            email = parse_email(text)
        except ValidationError as e:
            logger.debug(f"Rejected email input from {state.phone}: {e}")
            return await self._reject(state, messages.invalid_email)

        state.email = email
        state.advance(ConversationStep.COLLECTING_JOB_DESCRIPTION)
        found = await self._profile_exists(email, state.phone)
        await self._send(state.phone, messages.email_accepted(email, found))
        return state

    async def _collect_job_description(
        self, state: ConversationState, text: str
    ) -> ConversationState | None:
        min_length = self.config.min_job_description_length
        try:
            text = parse_job_description(text, min_length)
        except ValidationError as e:
            logger.debug(f"Rejected job description from {state.phone}: {e}")
            return await self._reject(
                state,
                lambda attempt, limit: messages.job_description_too_short(
                    attempt, limit, min_length
                ),
            )

        state.job_description = text
        state.advance(ConversationStep.PROCESSING)
        await self._send(state.phone, messages.processing_started(state.email or "", len(text)))
        return await self._process(state)

    async def _reject(
        self, state: ConversationState, reply: Callable[[int, int], str]
    ) -> ConversationState | None:
        state.attempt_count += 1
        limit = self.config.max_attempts
        if state.attempt_count >= limit:
            logger.info(
                f"Conversation for {state.phone} reset after {state.attempt_count} "
                f"invalid inputs at step {state.step.value}"
            )
            self._discard(state.phone)
            await self._send(state.phone, messages.too_many_attempts())
            return None

        await self._send(state.phone, reply(state.attempt_count, limit))
        return state

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    async def _process(self, state: ConversationState) -> ConversationState | None:
        phone = state.phone
        try:
            result = await self.pipeline.run(
                email=state.email,
                phone=phone,
                job_description=state.job_description or "",
                display_name=state.display_name,
            )
        except NotFoundError:
            if not self._is_current(state):
                return None
            logger.info(f"No profile for {state.email or phone}; sending registration prompt")
            self._discard(phone)
            await self._send(phone, messages.profile_not_found(state.email or phone))
            if self.notifier is not None:
                await self.notifier.notify_unregistered(phone, state.email, state.display_name)
            return None
        except Exception as e:
            logger.error(f"Resume generation failed for {phone}: {e}", exc_info=True)
            if not self._is_current(state):
                return None
            self._discard(phone)
            await self._send(phone, messages.generation_failed())
            return None

        if not self._is_current(state):
            logger.info(
                f"Discarding result {result.artifact_id}: conversation "
                f"{state.conversation_id} was cancelled or replaced"
            )
            return None

        await self._deliver(state, result)
        return state

    async def _deliver(self, state: ConversationState, result: PipelineResult) -> None:
        state.advance(ConversationStep.COMPLETED)
        phone = state.phone
        await self._send(
            phone,
            messages.resume_ready(result.file_name, result.artifact.size_bytes, result.url),
        )
        sent = await self.gateway.send_document(
            phone, result.url, messages.document_caption(result.file_name)
        )
        if not sent.success:
            logger.warning(f"Document delivery to {phone} failed: {sent.error}")
        elif result.recorded and self.pipeline.recorder is not None:
            try:
                await self.pipeline.recorder.record_share(result.artifact_id)
            except Exception as e:
                logger.warning(f"Could not record share for {result.artifact_id}: {e}")

        self._schedule_deletion(state)

    def _is_current(self, state: ConversationState) -> bool:
        current = self.store.get(state.phone)
        return (
            current is not None
            and current.conversation_id == state.conversation_id
            and current.step == ConversationStep.PROCESSING
        )

    async def _profile_exists(self, email: str, phone: str) -> bool:
        try:
            profile = await self.pipeline.profiles.find_by_identity(email=email, phone=phone)
        except Exception as e:
            logger.warning(f"Profile lookup failed for {email}: {e}")
            return False
        return profile is not None

    async def _send(self, phone: str, text: str) -> SendResult:
        result = await self.gateway.send_text(phone, text)
        if not result.success:
            logger.warning(f"Message to {phone} was not delivered: {result.error}")
        return result

    # ------------------------------------------------------------------
    # Cleanup
    # ------------------------------------------------------------------

    def _discard(self, phone: str) -> None:
        """Delete a conversation and any deletion scheduled for it."""
        task = self._pending_deletions.pop(phone, None)
        if task is not None:
            task.cancel()
        self.store.delete(phone)

    def _schedule_deletion(self, state: ConversationState) -> None:
        grace = self.config.completion_grace_seconds
        if grace <= 0:
            self.store.delete(state.phone)
            return

        task = asyncio.create_task(self._delete_after_grace(state, grace))
        self._pending_deletions[state.phone] = task
        task.add_done_callback(lambda t, phone=state.phone: self._forget_task(phone, t))

    async def _delete_after_grace(self, state: ConversationState, grace: float) -> None:
        await self._sleep(grace)
        current = self.store.get(state.phone)
        if current is not None and current.conversation_id == state.conversation_id:
            self.store.delete(state.phone)
            logger.debug(f"Removed completed conversation for {state.phone}")

    def _forget_task(self, phone: str, task: asyncio.Task) -> None:
        if self._pending_deletions.get(phone) is task:
            del self._pending_deletions[phone]

    def sweep(self) -> list[str]:
        """Remove conversations idle past the timeout. Returns their phones."""
        removed = self.store.sweep(self._clock())
        for phone in removed:
            task = self._pending_deletions.pop(phone, None)
            if task is not None:
                task.cancel()
        if removed:
            logger.info(f"Swept {len(removed)} idle conversation(s)")
        return removed

    async def _sweep_loop(self) -> None:
        while True:
            await self._sleep(self.config.sweep_interval_seconds)
            try:
                self.sweep()
            except Exception as e:
                logger.error(f"Conversation sweep failed: {e}")

    def start(self) -> None:
        """Start the periodic idle sweep. Requires a running event loop."""
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.create_task(self._sweep_loop())
            logger.info(
                f"Conversation sweeper started (every {self.config.sweep_interval_seconds:.0f}s)"
            )

    async def stop(self) -> None:
        """Stop the sweeper and cancel scheduled deletions."""
        tasks = list(self._pending_deletions.values())
        if self._sweeper is not None:
            tasks.append(self._sweeper)
            self._sweeper = None
        self._pending_deletions.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def stats(self) -> dict[str, Any]:
        states = self.store.states()
        by_step = Counter(state.step.value for state in states)
        return {
            "active": len(states),
            "by_step": dict(by_step),
            "pending_deletions": len(self._pending_deletions),
            "sweeper_running": self._sweeper is not None and not self._sweeper.done(),
        }
