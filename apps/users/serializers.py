from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from .models import Worker, Employer

import logging

User = get_user_model()
logger = logging.getLogger(__name__)


class UserSerializer(serializers.ModelSerializer):
    role = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'username', 'first_name', 'last_name', 'email', 'phone_number', 'role']

    def get_role(self, obj):
        if obj.is_worker:
            return 'worker'
        if obj.is_employer:
            return 'employer'
        return None


class WorkerSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Worker
        fields = [
            'id', 'name', 'skills', 'experience_years', 'district', 'state',
            'rating', 'shakti_score', 'is_available'
        ]
        read_only_fields = fields


class WorkerProfileSerializer(serializers.ModelSerializer):
    skills = serializers.ListField(child=serializers.CharField(max_length=50), allow_empty=True, required=False)
    languages = serializers.ListField(child=serializers.CharField(max_length=30), allow_empty=True, required=False)

    class Meta:
        model = Worker
        fields = [
            'id', 'name', 'phone', 'email', 'gender', 'age', 'skills', 'languages',
            'experience_years', 'preferred_category', 'village', 'district', 'state',
            'pincode', 'work_radius', 'bio', 'is_available', 'rating', 'rating_count',
            'shakti_score', 'profile_completion', 'balance', 'registered_at'
        ]
        read_only_fields = [
            'id', 'phone', 'rating', 'rating_count', 'shakti_score',
            'profile_completion', 'balance', 'registered_at'
        ]


class WorkerRegistrationSerializer(serializers.ModelSerializer):
    password = serializers.CharField(max_length=128, min_length=8, write_only=True)
    skills = serializers.ListField(child=serializers.CharField(max_length=50), allow_empty=True, required=False)
    languages = serializers.ListField(child=serializers.CharField(max_length=30), allow_empty=True, required=False)

    class Meta:
        model = Worker
        fields = [
            'id', 'password', 'name', 'phone', 'email', 'aadhaar_number', 'gender', 'age',
            'skills', 'languages', 'experience_years', 'preferred_category', 'village',
            'district', 'state', 'pincode', 'work_radius', 'bio', 'shakti_score'
        ]
        read_only_fields = ['id', 'shakti_score']

    def validate_phone(self, value):
        if User.objects.filter(Q(username=value) | Q(phone_number=value)).exists():
            raise serializers.ValidationError("Phone number already registered.")
        return value

    def validate_password(self, value):
        try:
            validate_password(value)
        except DjangoValidationError as e:
            raise serializers.ValidationError(list(e.messages))
        return value

    @transaction.atomic
    def create(self, validated_data):
        password = validated_data.pop('password')
        user = User.objects.create_user(
            username=validated_data['phone'],
            password=password,
            phone_number=validated_data['phone'],
            first_name=validated_data['name'][:150],
            email=validated_data.get('email') or '',
        )
        worker = Worker.objects.create(user=user, **validated_data)
        logger.info(f"Registered worker {worker.id} ({worker.name}) with ShaktiScore {worker.shakti_score}")
        return worker


class EmployerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Employer
        fields = ['id', 'name', 'company_name', 'phone', 'email', 'city', 'state', 'created_at']
        read_only_fields = ['id', 'phone', 'created_at']


class EmployerRegistrationSerializer(serializers.ModelSerializer):
    password = serializers.CharField(max_length=128, min_length=8, write_only=True)

    class Meta:
        model = Employer
        fields = ['id', 'password', 'name', 'company_name', 'phone', 'email', 'city', 'state']
        read_only_fields = ['id']

    def validate_phone(self, value):
        if User.objects.filter(Q(username=value) | Q(phone_number=value)).exists():
            raise serializers.ValidationError("Phone number already registered.")
        return value

    def validate_password(self, value):
        try:
            validate_password(value)
        except DjangoValidationError as e:
            raise serializers.ValidationError(list(e.messages))
        return value

    @transaction.atomic
    def create(self, validated_data):
        password = validated_data.pop('password')
        user = User.objects.create_user(
            username=validated_data['phone'],
            password=password,
            phone_number=validated_data['phone'],
            first_name=validated_data['name'][:150],
            email=validated_data.get('email') or '',
        )
        employer = Employer.objects.create(user=user, **validated_data)
        logger.info(f"Registered employer {employer.id} ({employer.company_name or employer.name})")
        return employer


class LoginSerializer(serializers.Serializer):
    identifier = serializers.CharField(max_length=255, trim_whitespace=True)
    password = serializers.CharField(max_length=128, write_only=True)

    def validate(self, data):
        identifier = data.get('identifier').strip()
        user = User.objects.filter(
            Q(phone_number=identifier) | Q(username__iexact=identifier) | Q(email__iexact=identifier)
        ).first()
        if not user or not user.check_password(data.get('password')):
            logger.warning(f"Failed login for identifier: {identifier}")
            raise serializers.ValidationError("Invalid credentials.")
        if not user.is_active:
            raise serializers.ValidationError("User account is disabled. Please contact support.")
        data['user'] = user
        return data

    def save(self):
        user = self.validated_data['user']
        user.last_login = timezone.now()
        user.save(update_fields=['last_login'])
        return user


class AvailabilitySerializer(serializers.Serializer):
    is_available = serializers.BooleanField()
