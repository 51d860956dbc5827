"""
===============================================================================
APPLICATION SERVICE: User Service (orchestrator)
===============================================================================

Name:
    UserService

Business Goal:
    Exponer las operaciones públicas del ciclo de vida de usuarios
    (login, alta, lecturas, merge-patch, baja, claims y la escritura atómica
    de demostración) componiendo hasher, validador de claims, emisor de
    tokens, repositorio y coordinador transaccional.

Why (Context / Intención):
    - Invariantes:
        * password_hash siempre es salida del hasher (nunca texto plano)
        * claims validados ANTES de persistir
        * toda validación ocurre antes de la escritura: una falla deja el
          registro almacenado sin cambios
        * la unidad atómica es todo-o-nada
    - Las operaciones son stateless: el único estado compartido es el
      repositorio (thread-safe) y la configuración (read-only).

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    UserService

Responsibilities:
    - Login: email -> verificación de password -> token firmado.
    - Create: valida claims, hashea, estampa id/timestamps, inserta.
    - Update: carga, aplica solo campos presentes, estampa updated_at, reemplaza.
    - GetClaims (puro) y Ping (liveness) como operaciones separadas.
    - AtomicDemo: dos inserts en una sola transacción.

Collaborators:
    - domain.repositories.UserRepository / TransactionCoordinator
    - identity.passwords.CredentialHasher
    - identity.claims: validate_claims / all_claims
    - identity.tokens.issue_token
    - crosscutting.metrics / crosscutting.logger
===============================================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

from ..crosscutting.exceptions import CredentialsError, NotFoundError
from ..crosscutting.logger import logger
from ..crosscutting.metrics import record_login_attempt, record_transaction
from ..domain.entities import LoginResult, NewUser, User, UserPatch
from ..domain.identifiers import new_record_id
from ..domain.repositories import TransactionCoordinator, UserRepository
from ..identity.claims import all_claims, validate_claims
from ..identity.passwords import CredentialHasher
from ..identity.tokens import issue_token

# R: registros que escribe la demo de transacción atómica.
ATOMIC_DEMO_ENTITIES: tuple[str, ...] = ("Entity1", "Entity2")


def utc_now() -> datetime:
    """
    Reloj UTC con precisión de milisegundos.

    BSON guarda datetimes en ms; truncar acá mantiene el round-trip sin pérdida.
    """
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


class UserService:
    """Orquestador de operaciones de usuario."""

    def __init__(
        self,
        users: UserRepository,
        transactions: TransactionCoordinator,
        *,
        hasher: CredentialHasher,
        token_secret: str,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._users = users
        self._transactions = transactions
        self._hasher = hasher
        self._token_secret = token_secret
        self._clock = clock

    # =========================================================================
    # Login
    # =========================================================================
    def login(self, email: str, password: str) -> LoginResult:
        """
        Verifica credenciales y emite un token con los claims almacenados.

        Ambos fallos son CredentialsError (mismo error_code); solo el mensaje
        distingue "email not found" de "incorrect password".
        """
        try:
            user = self._users.find_by_email(email)
        except NotFoundError as exc:
            record_login_attempt("unknown_email")
            logger.info("Login rechazado: email desconocido")
            raise CredentialsError("email not found") from exc

        if not self._hasher.verify(password, user.password_hash):
            record_login_attempt("wrong_password")
            logger.info("Login rechazado: password incorrecto", extra={"user_id": user.id})
            raise CredentialsError("incorrect password")

        token = issue_token(user.id, self._token_secret, user.claims)
        record_login_attempt("success")
        logger.info("Login exitoso", extra={"user_id": user.id})
        return LoginResult(user=user, token=token)

    # =========================================================================
    # Create
    # =========================================================================
    def create(self, new_user: NewUser) -> str:
        """Da de alta un usuario y devuelve su id. Nada se escribe si falla antes."""
        validate_claims(new_user.claims)
        password_hash = self._hasher.hash(new_user.password)

        now = self._clock()
        user = User(
            id=new_record_id(),
            name=new_user.name,
            surnames=new_user.surnames,
            email=new_user.email,
            password_hash=password_hash,
            claims=list(new_user.claims),
            created_at=now,
            updated_at=now,
        )
        inserted_id = self._users.insert(user)
        logger.info("Usuario creado", extra={"user_id": inserted_id})
        return inserted_id

    # =========================================================================
    # Reads
    # =========================================================================
    def get_all(self) -> List[User]:
        return self._users.find_all()

    def get_by_email(self, email: str) -> User:
        return self._users.find_by_email(email)

    def get_by_id(self, user_id: str) -> User:
        return self._users.find_by_id(user_id)

    # =========================================================================
    # Update (merge-patch)
    # =========================================================================
    def update(self, user_id: str, patch: UserPatch) -> None:
        """
        Aplica solo los campos presentes en `patch`.

        Reglas:
          - new_password exige old_password que verifique contra el hash actual
            (se chequea antes que los claims).
          - claims nuevos se validan antes de aplicarse.
          - updated_at se refresca siempre; created_at nunca cambia.
        """
        current = self._users.find_by_id(user_id)
        changes: Dict[str, Any] = {}

        if patch.name is not None:
            changes["name"] = patch.name
        if patch.surnames is not None:
            changes["surnames"] = patch.surnames
        if patch.email is not None:
            changes["email"] = patch.email

        if patch.new_password is not None:
            if patch.old_password is None or not self._hasher.verify(
                patch.old_password, current.password_hash
            ):
                logger.info("Update rechazado: old password inválido", extra={"user_id": user_id})
                raise CredentialsError("old password incorrect")
            changes["password_hash"] = self._hasher.hash(patch.new_password)

        if patch.claims is not None:
            validate_claims(patch.claims)
            changes["claims"] = list(patch.claims)

        updated = replace(current, **changes, updated_at=self._clock())
        self._users.replace_by_id(user_id, updated)
        logger.info(
            "Usuario actualizado",
            extra={"user_id": user_id, "fields": sorted(changes)},
        )

    # =========================================================================
    # Delete
    # =========================================================================
    def delete(self, user_id: str) -> None:
        self._users.delete_by_id(user_id)
        logger.info("Usuario eliminado", extra={"user_id": user_id})

    # =========================================================================
    # Claims / health
    # =========================================================================
    def get_claims(self) -> Dict[int, str]:
        """Tabla de claims válidos (pura, sin I/O)."""
        return all_claims()

    def ping(self) -> None:
        """Probe de conectividad contra el backend (BackendUnavailableError)."""
        self._users.ping()

    # =========================================================================
    # Atomic demo
    # =========================================================================
    def atomic_demo(self) -> List[str]:
        """
        Inserta dos usuarios de demostración en una única transacción.

        Los hashes se calculan antes de abrir la unidad (sin I/O adentro que
        no sea de la base). Si cualquier insert falla, ninguno queda visible.
        """
        now = self._clock()
        users = [
            User(
                id=new_record_id(),
                name=label,
                surnames=label,
                email=label,
                password_hash=self._hasher.hash(label),
                claims=[],
                created_at=now,
                updated_at=now,
            )
            for label in ATOMIC_DEMO_ENTITIES
        ]

        operations = [self._insert_operation(user) for user in users]
        try:
            inserted = self._transactions.run(operations)
        except Exception:
            record_transaction("aborted")
            raise

        record_transaction("committed")
        return [str(user_id) for user_id in inserted]

    def _insert_operation(self, user: User) -> Callable[[Any], str]:
        def operation(session: Any) -> str:
            return self._users.insert(user, session=session)

        return operation
