from rest_framework import serializers
from core.constants import WITHDRAWAL_METHOD_CHOICES
from .models import Earning, Withdrawal


class EarningSerializer(serializers.ModelSerializer):
    job_title = serializers.CharField(source='job.title', read_only=True)

    class Meta:
        model = Earning
        fields = ['id', 'job', 'job_title', 'application', 'amount', 'description', 'date']
        read_only_fields = fields


class WithdrawalSerializer(serializers.ModelSerializer):
    class Meta:
        model = Withdrawal
        fields = ['id', 'amount', 'method', 'status', 'date']
        read_only_fields = fields


class WithdrawalRequestSerializer(serializers.Serializer):
    # Positivity and balance checks happen under the worker lock
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    method = serializers.ChoiceField(choices=WITHDRAWAL_METHOD_CHOICES, default='bank_transfer')


class ProcessPaymentSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True)


class TransactionSerializer(serializers.Serializer):
    id = serializers.CharField()
    type = serializers.CharField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    description = serializers.CharField()
    date = serializers.DateTimeField()
    status = serializers.CharField()
    job_id = serializers.IntegerField(required=False)
    job_title = serializers.CharField(required=False)


class WalletSerializer(serializers.Serializer):
    balance = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_earned = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_withdrawn = serializers.DecimalField(max_digits=12, decimal_places=2)
    transactions = TransactionSerializer(many=True)
