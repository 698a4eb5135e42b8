from django.contrib.auth.base_user import BaseUserManager
from django.core.exceptions import ValidationError
from django.db import models
from utils.constants import ANONYMOUS_EMAIL_DOMAIN


class UserQuerySet(models.QuerySet):
    def registered(self):
        """Exclude guest checkout accounts"""
        return self.exclude(email__iendswith=ANONYMOUS_EMAIL_DOMAIN)


class CustomUserManager(BaseUserManager.from_queryset(UserQuerySet)):
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email).lower()

        if self.model.objects.filter(email=email).exists():
            raise ValidationError('A user with this email already exists')

        extra_fields.setdefault('is_active', True)

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('is_superuser', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Super user must have is_staff = True')

        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Super user must have is_superuser = True')

        if not password:
            raise ValueError('Superuser must have a password')

        return self.create_user(email=email, password=password, **extra_fields)

    def get_by_natural_key(self, username):
        return self.get(email__iexact=username)
