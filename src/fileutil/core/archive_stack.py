"""Stack of in-progress archive sessions with nesting of child archives into parents.

Every :meth:`ArchiveStack.begin` pushes a new :class:`ArchiveSession`; writes and copies go to the
session on top of the stack. A child session created with ``add_to_parent=True`` writes into a
temporary file next to its final location. When the child is finalized it registers a completion
future with its parent; the parent, when finalized in turn, waits on all of these futures, splices
each child's bytes in as a single entry named by the child's logical path, deletes the temporary
file and only then finalizes its own writer.
"""

import enum
import logging
import os
import os.path as osp
from concurrent.futures import Future
from typing import NamedTuple, Optional

from ..exceptions import IOFailureError, UnsupportedFormatError, UsageError
from ..formats.archive_formats import SUPPORTED_FORMATS, get_archive_writer
from ..io.copyfile import accumulate_crc32c
from .paths import resolve_path

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    OPEN = enum.auto()
    CLOSING = enum.auto()
    CLOSED = enum.auto()


class ChildArchive(NamedTuple):
    """Where a finished archive was written, the name it takes inside its parent and the CRC32c
    of its bytes."""

    resolved_path: str
    logical_path: str
    crc32c: int


class ArchiveSession:
    """One in-progress archive build.

    Args:
        writer: Archive writer for the configured format.
        logical_path: Archive name including the format extension, e.g. ``'docs.tar.gz'``.
        resolved_path: Filesystem path the bytes are written to. A temporary path if this session
            will be folded into a parent.
        stream: Binary file object at ``resolved_path`` fed by ``writer``.
        add_to_parent: Whether the finished archive is merged into the parent session.
    """

    def __init__(self, writer, logical_path, resolved_path, stream, add_to_parent):
        self.writer = writer
        self.logical_path = logical_path
        self.resolved_path = resolved_path
        self.stream = stream
        self.add_to_parent = add_to_parent
        self.pending_children: list[Future] = []
        self.entries: dict[str, Optional[int]] = {}
        self.state = SessionState.OPEN
        self.completion: Optional[Future] = None

    def _check_open(self):
        if self.state is not SessionState.OPEN:
            raise UsageError(
                f'Archive session {self.logical_path} is {self.state.name.lower()}, '
                'no more entries can be added'
            )

    def add_bytes(self, data: bytes, name: str):
        """Append in-memory data as the entry ``name``."""
        self._check_open()
        self.entries[name] = self.writer.add_bytes(name, data)

    def add_path(self, src_path, name: str):
        """Append a file, or a directory recursively, under the entry ``name``."""
        self._check_open()
        src_path = os.fspath(src_path)
        if osp.isdir(src_path):
            self.entries.update(self.writer.add_directory(name, src_path))
        else:
            self.entries[name] = self.writer.add_file(name, src_path)

    def register_child(self) -> Future:
        """Create the completion future a folding child resolves once its archive is closed."""
        self._check_open()
        future = Future()
        future.set_running_or_notify_cancel()
        self.pending_children.append(future)
        return future

    def finalize(self):
        """Wait for all pending children, splice them in, then close the writer and the stream.

        Every pending child is waited on, even after one of them failed. Temporary outputs of
        children that were not spliced are removed before returning.

        Returns:
            The :class:`ChildArchive` describing this session's output, including the CRC32c of
            the closed archive file.

        Raises:
            UsageError: If the session was already finalized.
            IOFailureError: If a child failed, a spliced child does not match its checksum, or the
                output could not be written.
        """
        if self.state is not SessionState.OPEN:
            raise UsageError(f'Archive session {self.logical_path} was already finalized')
        self.state = SessionState.CLOSING

        # Children registered after this point are not covered by this finalize
        children = []
        errors = []
        for future in list(self.pending_children):
            try:
                children.append(future.result())
            except Exception as e:
                errors.append(e)

        try:
            if errors:
                error = errors[0]
                if isinstance(error, IOFailureError):
                    raise error
                raise IOFailureError(
                    self.resolved_path, f'child archive failed: {error}'
                ) from error
            for child in children:
                self._splice_child(child)
            self.writer.close()
            self.stream.close()
            with open(self.resolved_path, 'rb') as f:
                crc32c = accumulate_crc32c(f)
        except OSError as e:
            self._abort()
            if isinstance(e, IOFailureError):
                raise
            raise IOFailureError(self.resolved_path, str(e)) from e
        finally:
            for child in children:
                if osp.exists(child.resolved_path):
                    os.remove(child.resolved_path)

        self.state = SessionState.CLOSED
        return ChildArchive(self.resolved_path, self.logical_path, crc32c)

    def _abort(self):
        # Output after an abort holds whatever was added so far and must not be relied upon
        try:
            self.writer.close()
        finally:
            self.stream.close()
            self.state = SessionState.CLOSED

    def _splice_child(self, child: ChildArchive):
        size = osp.getsize(child.resolved_path)
        with open(child.resolved_path, 'rb') as f:
            crc32c = self.writer.add_fileobj(child.logical_path, f, size)
        if crc32c != child.crc32c:
            raise IOFailureError(
                child.resolved_path,
                f'checksum mismatch for {child.logical_path}: '
                f'expected {child.crc32c:08x}, read {crc32c:08x}',
            )
        self.entries[child.logical_path] = crc32c
        os.remove(child.resolved_path)
        logger.debug('Spliced %s into %s', child.logical_path, self.logical_path)


class ArchiveStack:
    """Manages the nested archive sessions of one owner.

    Not safe for concurrent mutation: begin, writes and finalize calls must be sequenced by the
    caller.

    Args:
        compress_format: ``'tar.gz'`` or ``'zip'``.
        relative_path: Base directory archive names are resolved against. If None, the current
            working directory is used.
        executor: Optional :class:`concurrent.futures.Executor` on which the finalize step runs.
            If None, finalizing happens inline and the returned future is already done.
    """

    def __init__(self, compress_format='tar.gz', relative_path=None, executor=None):
        self.compress_format = compress_format
        self.relative_path = relative_path
        self.executor = executor
        self._sessions: list[ArchiveSession] = []
        self._temp_counter = 0

    def __len__(self):
        return len(self._sessions)

    def __bool__(self):
        return bool(self._sessions)

    def top(self) -> Optional[ArchiveSession]:
        """The active session, or None if no archive is open."""
        return self._sessions[-1] if self._sessions else None

    def pop(self) -> Optional[ArchiveSession]:
        return self._sessions.pop() if self._sessions else None

    def begin(self, name, add_to_parent=True) -> ArchiveSession:
        """Open a new archive session and push it on the stack.

        Args:
            name: Destination path and file name, relative to ``relative_path``. The compress
                format extension is appended.
            add_to_parent: If a parent session exists, fold this archive into it on finalize
                instead of leaving it as a standalone file.

        Raises:
            UnsupportedFormatError: If ``compress_format`` is not supported.
        """
        compress_format = self.compress_format
        if compress_format not in SUPPORTED_FORMATS:
            raise UnsupportedFormatError(compress_format)

        logical_path = f'{os.fspath(name)}.{compress_format}'
        resolved_path = resolve_path(logical_path, self.relative_path)

        if self._sessions and add_to_parent:
            resolved_path = osp.join(osp.dirname(resolved_path), f'.temp-{self._temp_counter}')
            self._temp_counter += 1

        os.makedirs(osp.dirname(resolved_path), exist_ok=True)
        stream = open(resolved_path, 'wb')
        try:
            writer = get_archive_writer(compress_format, stream)
        except BaseException:
            stream.close()
            raise

        session = ArchiveSession(writer, logical_path, resolved_path, stream, add_to_parent)
        self._sessions.append(session)
        return session

    def finalize(self) -> Future:
        """Pop the active session and finalize it.

        If the session folds into a parent, a completion future is registered with the parent and
        resolved with this session's :class:`ChildArchive` once its output is closed.

        Returns:
            A future resolving to the :class:`ChildArchive` of the finalized session, or to None if
            no session was open. Errors are set on the future as :class:`IOFailureError`.
        """
        session = self.pop()
        if session is None:
            future = Future()
            future.set_result(None)
            return future

        parent = self.top()
        if session.add_to_parent and parent is not None:
            session.completion = parent.register_child()

        if self.executor is None:
            future = Future()
            future.set_running_or_notify_cancel()
            _run_finalize(session, future)
            return future

        return self.executor.submit(_finalize_and_notify, session)


def _finalize_and_notify(session):
    try:
        result = session.finalize()
    except BaseException as e:
        if session.completion is not None:
            session.completion.set_exception(e)
            # The parent never splices a failed child, so its temporary output goes now
            if osp.exists(session.resolved_path):
                os.remove(session.resolved_path)
        raise
    if session.completion is not None:
        session.completion.set_result(result)
    return result


def _run_finalize(session, future):
    try:
        future.set_result(_finalize_and_notify(session))
    except (OSError, UsageError) as e:
        future.set_exception(e)
