# accounts/models.py
from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models


class UserManager(BaseUserManager):
    """Hosts sign in with their email; the username is filled in for them."""

    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError('An email address is required')
        email = self.normalize_email(email)
        extra_fields.setdefault('username', self.model.unique_username_for(email))
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        if not (extra_fields['is_staff'] and extra_fields['is_superuser']):
            raise ValueError('A superuser needs is_staff=True and is_superuser=True')
        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    username = models.CharField(max_length=150, unique=True, blank=True)
    email = models.EmailField(unique=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['first_name']

    objects = UserManager()

    def __str__(self):
        return self.email

    @property
    def display_name(self):
        return self.get_full_name().strip() or self.email

    @classmethod
    def unique_username_for(cls, email):
        """Email local part, with a numeric suffix if it is already taken."""
        base = email.split('@')[0]
        username = base
        suffix = 1
        while cls.objects.filter(username=username).exists():
            username = f"{base}_{suffix}"
            suffix += 1
        return username

    def save(self, *args, **kwargs):
        if not self.username and self.email:
            self.username = self.unique_username_for(self.email)
        super().save(*args, **kwargs)
