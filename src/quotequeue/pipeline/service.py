"""Submit, list, approve and refuse orchestration for pending quotes."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
import logging
import re
import sqlite3
import time
from typing import Protocol
import uuid

from quotequeue.pipeline.config import ModerationSettings
from quotequeue.pipeline.errors import (
    CapacityError,
    DuplicateQuoteError,
    InfrastructureError,
    MissingCanonicalFileError,
    NotFoundError,
    StagingCleanupError,
    ValidationError,
)
from quotequeue.quotes.models import ApprovedQuote, CanonicalQuote, PendingQuote
from quotequeue.quotes.quote_file import IdAllocationError, QuoteFile, QuoteFileFormatError, QuoteFileRepository
from quotequeue.quotes.similarity import (
    APPROVAL_DUPLICATE_THRESHOLD,
    SUBMISSION_DUPLICATE_THRESHOLD,
    find_best_match,
)
from quotequeue.staging.repository import StagingRepository
from quotequeue.vcs.gateway import GatewayStatus, GitCommandError, open_gateway


QUEUE_CAP = 100
LIST_LIMIT = 10
ALL_LANGUAGES = "all"

_LANGUAGE_RE = re.compile(r"^\w+$", re.ASCII)

logger = logging.getLogger(__name__)


class VersionControl(Protocol):
    async def pull(self, remote: str, branch: str) -> None: ...

    async def add(self, paths: list[str]) -> None: ...

    async def commit(self, message: str) -> None: ...

    async def push(self, remote: str, branch: str) -> None: ...

    async def head(self) -> str: ...

    async def reset_hard(self, revision: str) -> None: ...


class SubmitStatus(str, Enum):
    ACCEPTED = "accepted"
    QUEUE_FULL = "queue_full"
    LANGUAGE_MISSING = "language_missing"
    DUPLICATE = "duplicate"


@dataclass(frozen=True, slots=True)
class SubmitOutcome:
    status: SubmitStatus
    language: str
    pending_id: str | None = None
    duplicate_id: int | None = None
    similarity: float | None = None

    @property
    def accepted(self) -> bool:
        return self.status is SubmitStatus.ACCEPTED

    def raise_for_status(self) -> None:
        """Raise the matching moderation error for any non-accepted outcome."""

        if self.status is SubmitStatus.QUEUE_FULL:
            raise CapacityError(language=self.language, cap=QUEUE_CAP)
        if self.status is SubmitStatus.LANGUAGE_MISSING:
            raise MissingCanonicalFileError(language=self.language)
        if self.status is SubmitStatus.DUPLICATE:
            if self.duplicate_id is None or self.similarity is None:
                raise ValueError("duplicate outcome requires duplicate_id and similarity")
            raise DuplicateQuoteError(duplicate_id=self.duplicate_id, similarity=self.similarity)


@dataclass(frozen=True, slots=True)
class ApprovalResult:
    quote: ApprovedQuote
    message: str
    path: str


def validate_language(language: str, *, allow_all: bool = False) -> str:
    """Return the lower-cased language tag or raise ValidationError.

    ``all`` only names a language filter for listing.
    """

    if not _LANGUAGE_RE.match(language):
        raise ValidationError(message="Invalid language name", value=language)
    tag = language.lower()
    if tag == ALL_LANGUAGES and not allow_all:
        raise ValidationError(message="Reserved language name", value=language)
    return tag


class ModerationPipeline:
    """Coordinates the staging area, the quote files and the git history."""

    def __init__(
        self,
        *,
        staging: StagingRepository,
        files: QuoteFileRepository,
        gateway_status: GatewayStatus,
        settings: ModerationSettings,
    ) -> None:
        self._staging = staging
        self._files = files
        self._gateway_status = gateway_status
        self._settings = settings
        # One working copy: index, HEAD and remotes are shared by every language.
        self._publish_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: ModerationSettings) -> "ModerationPipeline":
        gateway_status = open_gateway(
            settings.repo_path,
            git_executable=settings.git_executable,
            timeout_seconds=settings.git_timeout_seconds,
        )
        return cls(
            staging=StagingRepository(settings.db_path),
            files=QuoteFileRepository(settings.repo_path, settings.quotes_dir),
            gateway_status=gateway_status,
            settings=settings,
        )

    @property
    def staging(self) -> StagingRepository:
        return self._staging

    def close(self) -> None:
        self._staging.close()

    def _require_gateway(self) -> VersionControl:
        gateway = self._gateway_status.gateway
        if gateway is None:
            detail = self._gateway_status.error or "gateway was not initialized"
            raise InfrastructureError(stage="gateway", message=f"Git not available. {detail}")
        return gateway

    async def _load_quote_file(self, language: str) -> QuoteFile | None:
        try:
            return await asyncio.to_thread(self._files.load, language)
        except (OSError, QuoteFileFormatError) as exc:
            raise InfrastructureError(stage="read", message=str(exc)) from exc

    async def submit(self, text: str, source: str, language: str, submitted_by: str) -> SubmitOutcome:
        self._require_gateway()
        tag = validate_language(language)

        if await asyncio.to_thread(self._staging.count_pending, tag) >= QUEUE_CAP:
            return SubmitOutcome(status=SubmitStatus.QUEUE_FULL, language=tag)

        quote_file = await self._load_quote_file(tag)
        if quote_file is None:
            return SubmitOutcome(status=SubmitStatus.LANGUAGE_MISSING, language=tag)

        match = find_best_match(text, quote_file.quotes, threshold=SUBMISSION_DUPLICATE_THRESHOLD)
        if match is not None:
            logger.info(
                "Submission for %s looks like quote %s (score %.3f)",
                tag,
                match.quote_id,
                match.score,
            )
            return SubmitOutcome(
                status=SubmitStatus.DUPLICATE,
                language=tag,
                duplicate_id=match.quote_id,
                similarity=match.score,
            )

        pending = PendingQuote(
            id=uuid.uuid4().hex,
            text=text,
            source=source,
            language=tag,
            submitted_by=submitted_by,
            timestamp=int(time.time() * 1000),
        )
        if not await asyncio.to_thread(self._staging.insert_within_cap, pending, QUEUE_CAP):
            return SubmitOutcome(status=SubmitStatus.QUEUE_FULL, language=tag)

        logger.info("Staged quote %s for %s from %s", pending.id, tag, submitted_by)
        return SubmitOutcome(status=SubmitStatus.ACCEPTED, language=tag, pending_id=pending.id)

    async def list_pending(self, language: str = ALL_LANGUAGES) -> list[PendingQuote]:
        self._require_gateway()
        tag = validate_language(language, allow_all=True)
        return await asyncio.to_thread(
            self._staging.list_pending,
            None if tag == ALL_LANGUAGES else tag,
            limit=LIST_LIMIT,
        )

    async def approve(
        self,
        pending_id: str,
        *,
        edited_text: str | None = None,
        edited_source: str | None = None,
        approver: str,
    ) -> ApprovalResult:
        gateway = self._require_gateway()

        pending = await asyncio.to_thread(self._staging.get, pending_id)
        if pending is None:
            raise NotFoundError(pending_id=pending_id)
        language = validate_language(pending.language)

        text = edited_text if edited_text is not None else pending.text
        source = edited_source if edited_source is not None else pending.source

        async with self._publish_lock:
            result = await self._publish(
                gateway,
                language=language,
                text=text,
                source=source,
                approver=approver,
            )

        try:
            removed = await asyncio.to_thread(self._staging.delete, pending_id)
        except sqlite3.Error as exc:
            logger.exception("Quote %s published but staging entry %s was not removed", result.quote.id, pending_id)
            raise StagingCleanupError(quote=result.quote, pending_id=pending_id, message=str(exc)) from exc
        if removed == 0:
            logger.warning("Staging entry %s disappeared before cleanup", pending_id)

        logger.info("Approved quote %s for %s as id %s by %s", pending_id, language, result.quote.id, approver)
        return result

    async def _publish(
        self,
        gateway: VersionControl,
        *,
        language: str,
        text: str,
        source: str,
        approver: str,
    ) -> ApprovalResult:
        settings = self._settings
        try:
            await gateway.pull(settings.pull_remote, settings.branch)
            revision = await gateway.head()
        except GitCommandError as exc:
            raise InfrastructureError(stage="pull", message=str(exc)) from exc

        quote_file = await self._load_quote_file(language)
        if quote_file is None:
            quote_file = QuoteFile.new(language, self._files.path_for(language))
        else:
            match = find_best_match(text, quote_file.quotes, threshold=APPROVAL_DUPLICATE_THRESHOLD)
            if match is not None:
                raise DuplicateQuoteError(duplicate_id=match.quote_id, similarity=match.score)

        try:
            quote_id = quote_file.next_id()
        except IdAllocationError as exc:
            raise InfrastructureError(stage="allocate", message=str(exc)) from exc

        quote = CanonicalQuote(
            id=quote_id,
            text=text,
            source=source,
            length=len(text),
            approved_by=approver,
        )
        quote_file.append(quote)
        relative_path = self._files.relative_path_for(language)

        stage = "write"
        try:
            await asyncio.to_thread(self._files.save, quote_file)
            stage = "add"
            await gateway.add([relative_path])
            stage = "commit"
            await gateway.commit(f"Added quote to {language}.json")
            stage = "push"
            await gateway.push(settings.push_remote, settings.branch)
        except (OSError, GitCommandError) as exc:
            await self._rollback(gateway, revision=revision, language=language, created=quote_file.created)
            raise InfrastructureError(stage=stage, message=str(exc)) from exc

        if quote_file.created:
            message = f"Created file {language}.json and added quote."
        else:
            message = f"Added quote to {language}.json."
        return ApprovalResult(quote=quote, message=message, path=relative_path)

    async def _rollback(self, gateway: VersionControl, *, revision: str, language: str, created: bool) -> None:
        """Return the working copy to the pre-approval revision."""

        logger.warning("Rolling back %s.json to %s after failed approval", language, revision)
        try:
            await gateway.reset_hard(revision)
            if created:
                await asyncio.to_thread(self._files.discard, language)
        except (OSError, GitCommandError):
            logger.exception("Rollback of %s.json to %s failed; working copy needs manual cleanup", language, revision)

    async def refuse(self, pending_id: str) -> None:
        self._require_gateway()
        if await asyncio.to_thread(self._staging.delete, pending_id) == 0:
            raise NotFoundError(pending_id=pending_id)
        logger.info("Refused quote %s", pending_id)
