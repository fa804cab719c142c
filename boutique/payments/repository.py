"""
Accès aux données pour la feature 'payments'.
- payment_intents: journal local des initiations (une ligne par référence passerelle)
- financial_transactions: grand livre en ajout seul, dédupliqué par event_key
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging
import boutique.infra.supabase_client as supabase_client
from boutique.utils.errors import PersistenceError

logger = logging.getLogger(__name__)

# module boutique.payments.repository
def _now() -> str:
    return datetime.now(timezone.utc).isoformat()

def log_payment_intent(
    *,
    gateway: str,
    reference: str,
    amount: float,
    currency: str,
    status: str,
    metadata: Dict[str, Any],
) -> Optional[dict]:
    """
    Journalise une initiation de paiement (best-effort).
    - Retourne la ligne insérée, None en cas d'erreur (jamais d'exception:
      le paiement existe déjà côté passerelle).
    """
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("payment_intents")
            .insert({
                "gateway": gateway,
                "gateway_reference": reference,
                "amount": amount,
                "currency": currency.upper(),
                "status": status,
                "metadata": metadata,
                "created_at": _now(),
            })
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else {"status": "ok"}
    except Exception:
        logger.exception("payments.repository.log_payment_intent failed gateway=%s reference=%s", gateway, reference)
        return None

def update_payment_intent_status(*, gateway: str, reference: str, status: str) -> int:
    """« set to X » idempotent; retourne le nombre de lignes touchées."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("payment_intents")
            .update({"status": status, "updated_at": _now()})
            .eq("gateway", gateway)
            .eq("gateway_reference", reference)
            .execute()
        )
        return len(res.data or [])
    except Exception as e:
        logger.exception("payments.repository.update_payment_intent_status failed reference=%s", reference)
        raise PersistenceError(detail=str(e)) from e

def record_financial_transaction(row: Dict[str, Any]) -> bool:
    """
    Ajoute une écriture au grand livre.
    Upsert sur event_key avec ignore_duplicates: un webhook rejoué n'enregistre rien de plus.
    Retourne True si une ligne a été créée, False si l'événement était déjà connu.
    """
    if not row.get("event_key"):
        raise ValueError("event_key is required")
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("financial_transactions")
            .upsert({**row, "processed_at": row.get("processed_at") or _now()}, on_conflict="event_key", ignore_duplicates=True)
            .execute()
        )
        return bool(res.data)
    except Exception as e:
        logger.exception("payments.repository.record_financial_transaction failed event_key=%s", row.get("event_key"))
        raise PersistenceError(detail=str(e)) from e
