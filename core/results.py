"""
CORE SERVICE RESULTS - Metri
============================

Contratto uniforme per i servizi di tutte le app: ogni operazione ritorna
un ServiceResult e non solleva eccezioni verso le view.
"""

import functools
import logging
from dataclasses import dataclass
from typing import Any, Optional

from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError, transaction


@dataclass
class ServiceResult:
    """
    Esito di un'operazione di servizio.

    Usage:
        result = PaymentService.create(...)
        if result:
            payment = result.value
        else:
            messages.error(request, result.error)
    """

    ok: bool
    value: Any = None
    error: Optional[str] = None

    @classmethod
    def success(cls, value=None) -> "ServiceResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "ServiceResult":
        return cls(ok=False, error=error)

    def __bool__(self):
        return self.ok


def validation_message(exc: ValidationError) -> str:
    """Converte una ValidationError in un messaggio leggibile."""
    if hasattr(exc, "error_dict"):
        parts = []
        for field, messages in exc.message_dict.items():
            text = "; ".join(messages)
            parts.append(text if field == "__all__" else f"{field}: {text}")
        return " | ".join(parts)
    return "; ".join(exc.messages)


def service_operation(action: str):
    """
    Decorator per i metodi di servizio.

    Esegue l'operazione in un savepoint e traduce gli errori in ServiceResult:
    - ValidationError -> messaggio di validazione (nessuna scrittura eseguita)
    - IntegrityError -> vincolo DB violato (es. pagamento duplicato)
    - DatabaseError -> errore generico, loggato con traceback

    Se la funzione ritorna già un ServiceResult viene passato così com'è,
    altrimenti il valore ritornato diventa ServiceResult.success(valore).

    Args:
        action: Descrizione dell'operazione per messaggi e log (es. "creare il pagamento")
    """

    def decorator(func):
        logger = logging.getLogger(func.__module__)

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                with transaction.atomic():
                    result = func(*args, **kwargs)
            except ValidationError as e:
                message = validation_message(e)
                logger.warning(f"Validazione fallita ({action}): {message}")
                return ServiceResult.failure(message)
            except IntegrityError as e:
                logger.error(f"Vincolo violato ({action}): {e}")
                return ServiceResult.failure(
                    f"Impossibile {action}: il dato esiste già o viola un vincolo."
                )
            except DatabaseError:
                logger.exception(f"Errore database ({action})")
                return ServiceResult.failure(f"Errore del database: impossibile {action}.")

            if isinstance(result, ServiceResult):
                return result
            return ServiceResult.success(result)

        return wrapper

    return decorator


def get_object_or_fail(model, pk, label=None):
    """
    Recupera un oggetto per pk dentro un servizio.

    Un id malformato o inesistente diventa ValidationError, che
    service_operation traduce in ServiceResult fallito.
    """
    label = label or model._meta.verbose_name
    try:
        return model.objects.get(pk=pk)
    except (model.DoesNotExist, ValueError):
        raise ValidationError(f"Record non trovato: {label} {pk}")
