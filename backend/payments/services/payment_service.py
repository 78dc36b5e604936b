from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from accounts.permissions import Capability, is_staff_user, require
from core.errors import AuthorizationDenied, InvalidTransition, NotFound, ValidationFailure
from core.notify import notify
from invoices.models import Invoice
from invoices.services.invoice_service import freeze_home_amount
from payments.models import BankAccount, BankTransaction, Payment
from pricing.dataclasses import Money
from pricing.services.fx_service import FxConverter
from pricing.services.utils import d, money

logger = logging.getLogger(__name__)

PAYMENT_METHODS = {key for key, _ in Payment.METHOD_CHOICES}
REFERENCE_REQUIRED = {"bank_transfer", "mobile_money"}


def _payer_type(user) -> str:
    role = getattr(user, "role", "")
    if role in ("customer", "agent"):
        return role
    return "staff"


def _check_ownership(user, invoice: Invoice) -> None:
    role = getattr(user, "role", "")
    if role == "customer":
        if invoice.customer is None or invoice.customer.user_id != user.pk:
            raise AuthorizationDenied("Customers can only pay their own invoices")
    elif role == "agent":
        if invoice.agent_id != user.pk or invoice.invoice_direction != "to_agent":
            raise AuthorizationDenied("Agents can only pay invoices addressed to them")
    elif not is_staff_user(user):
        raise AuthorizationDenied("Not allowed to pay this invoice")


def _append_note(invoice: Invoice, line: str) -> None:
    invoice.notes = f"{invoice.notes}\n{line}" if invoice.notes else line
    invoice.save(update_fields=["notes", "updated_at"])


def _default_amount(invoice: Invoice, currency: str, fx: FxConverter) -> Decimal:
    outstanding = invoice.outstanding
    if currency == invoice.currency:
        return outstanding
    if currency == fx.home and invoice.exchange_rate:
        return money(outstanding * invoice.exchange_rate)
    return fx.convert(Money(outstanding, invoice.currency), currency).amount


def adjust_bank_balance(
    account: BankAccount,
    amount,
    is_credit: bool,
    *,
    reference_type: str = "",
    reference_id: Optional[int] = None,
    description: str = "",
    created_by=None,
) -> BankTransaction:
    """
    Move ``amount`` (in the account's currency) in or out of ``account`` and
    record the movement. The balance is updated with an F() expression so
    concurrent movements do not overwrite each other.
    """
    amount = money(amount)
    if amount < 0:
        raise ValidationFailure("Ledger amounts must not be negative")
    delta = amount if is_credit else -amount
    with transaction.atomic():
        BankAccount.objects.filter(pk=account.pk).update(current_balance=F("current_balance") + delta)
        account.refresh_from_db(fields=["current_balance"])
        txn = BankTransaction.objects.create(
            bank_account=account,
            amount=amount,
            is_credit=is_credit,
            balance_after=account.current_balance,
            reference_type=reference_type,
            reference_id=reference_id,
            description=description,
            created_by=created_by,
        )
    logger.info(
        "%s %s %s on account %s, balance now %s",
        "Credited" if is_credit else "Debited", amount, account.currency, account.pk, account.current_balance,
    )
    return txn


def submit_payment(
    invoice: Invoice,
    *,
    payer,
    payment_method: str,
    transaction_reference: Optional[str] = None,
    paid_at: Optional[datetime] = None,
    amount=None,
    currency: Optional[str] = None,
    bank_name: Optional[str] = None,
    mobile_provider: Optional[str] = None,
    notes: Optional[str] = None,
) -> Payment:
    """
    Record a payment claim against ``invoice``. It stays ``pending`` until
    finance verifies it; the invoice itself is only annotated.
    """
    require(payer, Capability.SUBMIT_PAYMENTS)
    _check_ownership(payer, invoice)
    if invoice.is_finalized:
        raise InvalidTransition(f"Invoice {invoice.invoice_number} is {invoice.status}; no further payments")
    if not payment_method:
        raise ValidationFailure("payment_method is required")
    if payment_method not in PAYMENT_METHODS:
        raise ValidationFailure(f"Unknown payment_method '{payment_method}'")
    if payment_method in REFERENCE_REQUIRED and not (transaction_reference or "").strip():
        raise ValidationFailure("A transaction reference is required for bank and mobile payments")

    fx = FxConverter()
    currency = (currency or invoice.currency).upper()
    amount = money(amount) if amount is not None else _default_amount(invoice, currency, fx)
    if amount <= 0:
        raise ValidationFailure("Payment amount must be positive")

    with transaction.atomic():
        payment = Payment.objects.create(
            invoice=invoice,
            amount=amount,
            currency=currency,
            payment_method=payment_method,
            paid_at=paid_at or timezone.now(),
            transaction_reference=transaction_reference,
            payer_type=_payer_type(payer),
            bank_name=bank_name,
            mobile_provider=mobile_provider,
            notes=notes,
            submitted_by=payer,
        )
        _append_note(
            invoice,
            f"Payment of {amount} {currency} marked by {payer.get_username()}, pending verification. "
            f"Ref: {transaction_reference or '-'}",
        )
    logger.info(
        "Payment %s submitted for invoice %s: %s %s via %s",
        payment.pk, invoice.invoice_number, amount, currency, payment_method,
    )
    return payment


def _locked_payment(payment: Union[Payment, int]) -> Payment:
    pk = payment.pk if isinstance(payment, Payment) else payment
    locked = Payment.objects.select_for_update().filter(pk=pk).first()
    if locked is None:
        raise NotFound(f"Payment {pk} not found")
    return locked


def verify_payment(
    payment: Union[Payment, int],
    *,
    deposit_account: Union[BankAccount, int, None],
    verified_by,
    notes: Optional[str] = None,
) -> Payment:
    """
    Confirm a pending payment: freeze its home-currency value, move money on
    the chosen bank account and apply it to the invoice.
    """
    require(verified_by, Capability.VERIFY_PAYMENTS)
    if deposit_account is None or deposit_account == "":
        raise ValidationFailure("A deposit account is required to verify a payment")

    with transaction.atomic():
        payment = _locked_payment(payment)
        if payment.verification_status != "pending":
            raise InvalidTransition(f"Payment {payment.pk} is already {payment.verification_status}")

        account_pk = deposit_account.pk if isinstance(deposit_account, BankAccount) else deposit_account
        account = BankAccount.objects.select_for_update().filter(pk=account_pk).first()
        if account is None:
            raise ValidationFailure(f"Bank account {account_pk} not found")
        if not account.is_active:
            raise ValidationFailure(f"Bank account {account} is inactive")

        invoice = Invoice.objects.select_for_update().get(pk=payment.invoice_id)
        if invoice.status == "cancelled":
            raise InvalidTransition(f"Invoice {invoice.invoice_number} was cancelled")

        fx = FxConverter()
        amount_in_home, rate = freeze_home_amount(payment.amount, payment.currency, fx)

        if account.currency == payment.currency:
            ledger_amount = payment.amount
        elif account.currency == fx.home:
            ledger_amount = amount_in_home
        else:
            ledger_amount = fx.convert(Money(payment.amount, payment.currency), account.currency).amount
        # from_agent invoices are bills we pay, everything else is money received
        is_credit = invoice.invoice_direction != "from_agent"
        adjust_bank_balance(
            account,
            ledger_amount,
            is_credit,
            reference_type="payment",
            reference_id=payment.pk,
            description=f"Payment {payment.pk} for {invoice.invoice_number}",
            created_by=verified_by,
        )

        if payment.currency == invoice.currency:
            applied = payment.amount
        else:
            applied = fx.convert(Money(payment.amount, payment.currency), invoice.currency).amount
        invoice.amount_paid = money(d(invoice.amount_paid) + applied)
        if invoice.amount_paid >= invoice.amount:
            invoice.status = "paid"
            invoice.paid_at = payment.paid_at or timezone.now()
        else:
            invoice.status = "partially_paid"
        invoice.save(update_fields=["amount_paid", "status", "paid_at", "updated_at"])

        payment.verification_status = "verified"
        payment.verified_at = timezone.now()
        payment.verified_by = verified_by
        payment.deposit_account = account
        payment.exchange_rate = rate
        payment.amount_in_home = amount_in_home
        if notes:
            payment.notes = f"{payment.notes}\n{notes}" if payment.notes else notes
        payment.save()

        notify(
            payment.submitted_by,
            "Payment verified",
            f"Your payment of {payment.amount} {payment.currency} for invoice {invoice.invoice_number} was verified.",
            type="success",
        )
    logger.info(
        "Payment %s verified by %s: %s %s = %s home, invoice %s now %s",
        payment.pk, verified_by.get_username(), payment.amount, payment.currency,
        amount_in_home, invoice.invoice_number, invoice.status,
    )
    return payment


def reject_payment(payment: Union[Payment, int], *, rejected_by, reason: str) -> Payment:
    require(rejected_by, Capability.VERIFY_PAYMENTS)
    if not (reason or "").strip():
        raise ValidationFailure("A rejection reason is required")
    with transaction.atomic():
        payment = _locked_payment(payment)
        if payment.verification_status != "pending":
            raise InvalidTransition(f"Payment {payment.pk} is already {payment.verification_status}")
        payment.verification_status = "rejected"
        payment.rejection_reason = reason
        payment.verified_by = rejected_by
        payment.verified_at = timezone.now()
        payment.save(update_fields=["verification_status", "rejection_reason", "verified_by", "verified_at"])
        notify(
            payment.submitted_by,
            "Payment rejected",
            f"Your payment of {payment.amount} {payment.currency} was rejected: {reason}",
            type="warning",
        )
    logger.info("Payment %s rejected by %s: %s", payment.pk, rejected_by.get_username(), reason)
    return payment


@transaction.atomic
def record_payment(
    invoice: Invoice,
    *,
    recorded_by,
    deposit_account: Union[BankAccount, int, None],
    payment_method: str,
    amount=None,
    currency: Optional[str] = None,
    transaction_reference: Optional[str] = None,
    paid_at: Optional[datetime] = None,
    notes: Optional[str] = None,
) -> Payment:
    """Staff shortcut: submit and verify in one step."""
    if deposit_account is None:
        raise ValidationFailure("A deposit account is required to record a payment")
    payment = submit_payment(
        invoice,
        payer=recorded_by,
        payment_method=payment_method,
        transaction_reference=transaction_reference,
        paid_at=paid_at,
        amount=amount,
        currency=currency,
        notes=notes,
    )
    return verify_payment(payment, deposit_account=deposit_account, verified_by=recorded_by)


def pending_payments():
    return (
        Payment.objects.filter(verification_status="pending")
        .select_related("invoice", "submitted_by")
        .order_by("created_at")
    )
