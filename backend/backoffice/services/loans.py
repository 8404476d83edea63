"""Loan interest payments.

Recording an interest payment books the interest as an ``interest`` expense,
records an expense-type payment for the full instalment and moves the loan's
running totals.
"""

from __future__ import annotations

import logging

from django.db import transaction

from ..choices import AccountType, ExpenseCategory, TransactionType
from ..models import Expense, InterestPayment, LoanAccount, Payment
from .money import ZERO, quantize_money

logger = logging.getLogger(__name__)


def record_interest_payment(loan: LoanAccount, data: dict, created_by) -> InterestPayment:
    with transaction.atomic():
        loan = LoanAccount.objects.select_for_update().get(pk=loan.pk)

        interest_payment = InterestPayment(loan_account=loan, created_by=created_by, **data)
        interest_payment.save()

        description = f"Loan interest - {loan.bank_name} ({loan.account_number})"
        expense = Expense.objects.create(
            date=interest_payment.date,
            category=ExpenseCategory.INTEREST,
            description=description,
            amount=interest_payment.interest_amount,
            payment_method=interest_payment.payment_method,
            notes=interest_payment.notes,
            created_by=created_by,
        )
        payment = Payment.objects.create(
            payment_date=interest_payment.date,
            amount=interest_payment.total_amount,
            payment_method=interest_payment.payment_method,
            transaction_type=TransactionType.EXPENSE,
            account_type=AccountType.PAYABLE,
            expense=expense,
            notes=description,
            created_by=created_by,
        )
        interest_payment.expense = expense
        interest_payment.payment = payment
        interest_payment.save(update_fields=['expense', 'payment'])

        loan.total_interest_paid = quantize_money(loan.total_interest_paid + interest_payment.interest_amount)
        loan.total_principal_paid = quantize_money(loan.total_principal_paid + interest_payment.principal_amount)
        loan.outstanding_amount = max(
            ZERO, quantize_money(loan.outstanding_amount - interest_payment.principal_amount)
        )
        loan.save(update_fields=['total_interest_paid', 'total_principal_paid', 'outstanding_amount', 'updated_at'])
        logger.info(
            "Loan %s: interest %s, principal %s, outstanding now %s",
            loan.account_number, interest_payment.interest_amount,
            interest_payment.principal_amount, loan.outstanding_amount,
        )
    return interest_payment


def delete_interest_payment(interest_payment: InterestPayment) -> None:
    with transaction.atomic():
        loan = LoanAccount.objects.select_for_update().get(pk=interest_payment.loan_account_id)
        loan.total_interest_paid = max(
            ZERO, quantize_money(loan.total_interest_paid - interest_payment.interest_amount)
        )
        loan.total_principal_paid = max(
            ZERO, quantize_money(loan.total_principal_paid - interest_payment.principal_amount)
        )
        loan.outstanding_amount = quantize_money(loan.outstanding_amount + interest_payment.principal_amount)
        loan.save(update_fields=['total_interest_paid', 'total_principal_paid', 'outstanding_amount', 'updated_at'])

        if interest_payment.payment_id:
            interest_payment.payment.delete()
        if interest_payment.expense_id:
            interest_payment.expense.delete()
        logger.info("Deleted interest payment #%s on loan %s", interest_payment.pk, loan.account_number)
        interest_payment.delete()
