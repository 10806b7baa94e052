from decimal import Decimal

from django.db import models
from django.contrib.auth.models import AbstractUser
from django.core.validators import MinValueValidator, MaxValueValidator, RegexValidator

from core.constants import GENDER_CHOICES, JOB_CATEGORY_CHOICES

aadhaar_validator = RegexValidator(r'^\d{12}$', 'Aadhaar number must be 12 digits.')
pincode_validator = RegexValidator(r'^\d{6}$', 'Pincode must be 6 digits.')
phone_validator = RegexValidator(r'^(\+91)?[6-9]\d{9}$', 'Enter a valid Indian mobile number.')


class User(AbstractUser):
    phone_number = models.CharField(max_length=15, blank=True, null=True, unique=True)

    @property
    def is_employer(self):
        return hasattr(self, 'employer')

    @property
    def is_worker(self):
        return hasattr(self, 'worker')


class Worker(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='worker')
    name = models.CharField(max_length=100)
    phone = models.CharField(max_length=13, unique=True, validators=[phone_validator])
    email = models.EmailField(blank=True, null=True)
    aadhaar_number = models.CharField(max_length=12, unique=True, validators=[aadhaar_validator])
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True)
    age = models.PositiveSmallIntegerField(
        null=True, blank=True, validators=[MinValueValidator(18), MaxValueValidator(70)]
    )

    skills = models.JSONField(default=list, blank=True)
    languages = models.JSONField(default=list, blank=True)
    experience_years = models.PositiveIntegerField(default=0)
    preferred_category = models.CharField(max_length=30, choices=JOB_CATEGORY_CHOICES, blank=True)

    village = models.CharField(max_length=100, blank=True)
    district = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, db_index=True)
    pincode = models.CharField(max_length=6, blank=True, validators=[pincode_validator])
    work_radius = models.PositiveSmallIntegerField(
        default=10, validators=[MinValueValidator(1), MaxValueValidator(100)]
    )
    bio = models.TextField(max_length=500, blank=True)

    is_available = models.BooleanField(default=True)
    rating = models.FloatField(default=0, validators=[MinValueValidator(0), MaxValueValidator(5)])
    rating_count = models.PositiveIntegerField(default=0)
    shakti_score = models.PositiveSmallIntegerField(default=0)
    profile_completion = models.PositiveSmallIntegerField(default=0)

    # Derived from Earning and Withdrawal rows; only written by apps.payments.settlement
    balance = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    registered_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['state', 'district'], name='worker_state_district_idx'),
        ]

    def __str__(self):
        return f"Worker: {self.name}"

    def calculate_shakti_score(self):
        """Score profile completeness out of 100 and track completion percentage."""
        score = 0
        completed = 0
        total_fields = 12

        # Personal information
        for value, points in ((self.name, 5), (self.age, 5), (self.phone, 5),
                              (self.email, 3), (self.gender, 3), (self.aadhaar_number, 4)):
            if value:
                score += points
                completed += 1

        # Professional information
        if self.skills:
            score += 10
            completed += 1
            if len(self.skills) >= 3:
                score += 3
        if self.experience_years:
            score += 7
            completed += 1
        if self.preferred_category:
            score += 5
            completed += 1

        # Communication
        if self.languages:
            score += 8
            completed += 1
            if len(self.languages) >= 2:
                score += 4
            if 'English' in self.languages:
                score += 3

        # Location
        if self.village:
            score += 3
            completed += 1
        if self.district:
            score += 3
        if self.state:
            score += 2
        if self.pincode:
            score += 2

        if self.bio and len(self.bio) > 50:
            score += 2
        if self.rating > 0:
            score += 2

        self.shakti_score = min(score, 100)
        self.profile_completion = round(completed / total_fields * 100)
        return self.shakti_score

    def save(self, *args, **kwargs):
        self.calculate_shakti_score()
        update_fields = kwargs.get('update_fields')
        if update_fields is not None:
            kwargs['update_fields'] = set(update_fields) | {'shakti_score', 'profile_completion'}
        super().save(*args, **kwargs)


class Employer(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='employer')
    name = models.CharField(max_length=100)
    company_name = models.CharField(max_length=200, blank=True)
    phone = models.CharField(max_length=13, unique=True, validators=[phone_validator])
    email = models.EmailField(blank=True, null=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Employer: {self.company_name or self.name}"
