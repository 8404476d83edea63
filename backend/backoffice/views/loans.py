"""Loan account and interest payment API views."""

from rest_framework import serializers, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..activity_logger import log_activity
from ..models import InterestPayment, LoanAccount
from ..serializers import InterestPaymentSerializer, LoanAccountSerializer
from ..services.loans import delete_interest_payment
from .utils import ActivityLoggingMixin


class LoanAccountViewSet(ActivityLoggingMixin, viewsets.ModelViewSet):
    serializer_class = LoanAccountSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        queryset = LoanAccount.objects.all().order_by('-start_date', '-id')
        status = self.request.query_params.get('status')
        if status:
            queryset = queryset.filter(status=status)
        return queryset

    def perform_destroy(self, instance):
        if instance.interest_payments.exists():
            raise serializers.ValidationError(
                'This loan account has interest payments on record and cannot be deleted.'
            )
        super().perform_destroy(instance)

    @action(detail=True, methods=['get'])
    def interest_payments(self, request, pk=None):
        loan = self.get_object()
        payments = loan.interest_payments.all().order_by('-date', '-id')
        return Response(InterestPaymentSerializer(payments, many=True).data)


class InterestPaymentViewSet(viewsets.ModelViewSet):
    """Record and remove loan interest payments."""

    serializer_class = InterestPaymentSerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ['get', 'post', 'delete', 'head', 'options']

    def get_queryset(self):
        queryset = InterestPayment.objects.select_related('loan_account').order_by('-date', '-id')
        loan = self.request.query_params.get('loan_account')
        if loan:
            queryset = queryset.filter(loan_account_id=loan)
        return queryset

    def perform_create(self, serializer):
        instance = serializer.save(created_by=self.request.user)
        log_activity(self.request.user, 'created', instance)

    def perform_destroy(self, instance):
        log_activity(self.request.user, 'deleted', instance)
        delete_interest_payment(instance)
