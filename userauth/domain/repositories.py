"""
CRC — domain/repositories.py

Name
- Domain Repository & Transaction Interfaces (Protocols)

Responsibilities
- Define persistence contracts for the domain layer (ports).
- Keep the application independent from infrastructure (MongoDB, in-memory).
- Bind the generic repository to a concrete record type at type-check time,
  so callers never cast results.

Collaborators
- domain.entities: User
- infrastructure.repositories: mongo/*, in_memory/* implementations
- infrastructure.transactions: mongo/in-memory coordinators

Constraints
- Pure interfaces only: no side effects, no infrastructure imports.
- Implementations MUST match method signatures exactly.
- Lookups raise NotFoundError / InvalidIDError instead of returning None.

Notes
- We use typing.Protocol for structural subtyping ("duck typing").
- `session` is an opaque handle supplied by a TransactionCoordinator; plain
  (non-transactional) calls pass None.
"""

from typing import Any, Callable, List, Mapping, Protocol, Sequence, TypeVar

from .entities import User

T = TypeVar("T")

# R: A write step inside an atomic unit; receives the coordinator's session.
WriteOperation = Callable[[Any], Any]


class RecordMapper(Protocol[T]):
    """R: Lossless translation between a domain record and a storage document."""

    def to_document(self, record: T) -> dict[str, Any]:
        ...

    def from_document(self, document: Mapping[str, Any]) -> T:
        ...


class Repository(Protocol[T]):
    """
    R: Generic persistence capability set, parametrised by record type.

    Mirrors the primitives of a document store: find-many-by-filter,
    find-by-id, insert-one, replace-by-id, delete-by-id.
    """

    def find(self, filter: Mapping[str, Any]) -> List[T]:
        """R: Return every record matching an equality filter ({} = all)."""
        ...

    def find_by_id(self, record_id: str) -> T:
        """R: Raises InvalidIDError (bad format) or NotFoundError."""
        ...

    def insert(self, record: T, *, session: Any = None) -> str:
        """R: Insert one record and return its identifier."""
        ...

    def replace_by_id(self, record_id: str, record: T) -> None:
        """R: Full-document replace; NotFoundError if nothing matched."""
        ...

    def delete_by_id(self, record_id: str) -> None:
        """R: NotFoundError if nothing was deleted."""
        ...

    def ping(self) -> None:
        """R: Liveness probe; raises BackendUnavailableError."""
        ...


class UserRepository(Protocol):
    """
    R: Interface for user persistence (User Repository Adapter).

    Implementations translate User <-> storage records without loss.
    """

    def find_all(self) -> List[User]:
        ...

    def find_by_email(self, email: str) -> User:
        ...

    def find_by_id(self, user_id: str) -> User:
        ...

    def insert(self, user: User, *, session: Any = None) -> str:
        ...

    def replace_by_id(self, user_id: str, user: User) -> None:
        ...

    def delete_by_id(self, user_id: str) -> None:
        ...

    def ping(self) -> None:
        ...


class TransactionCoordinator(Protocol):
    """
    R: Runs a sequence of writes as one all-or-nothing unit.

    Contract:
      - Every operation receives the same session handle.
      - Any failure aborts the whole unit (TransactionAbortError); nothing
        written inside the unit remains visible.
      - Session resources are released on success and on failure.
    """

    def run(self, operations: Sequence[WriteOperation]) -> List[Any]:
        """R: Returns each operation's result, in order."""
        ...
