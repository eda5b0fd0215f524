# accounts/serializers.py
from django.contrib.auth import get_user_model
from rest_framework import serializers

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Sign-up form of a host. The username is never part of the API."""
    password = serializers.CharField(
        write_only=True,
        min_length=8,
        style={'input_type': 'password'},
    )

    class Meta:
        model = User
        fields = ('id', 'first_name', 'last_name', 'email', 'password', 'date_joined')
        read_only_fields = ('id', 'date_joined')
        extra_kwargs = {'first_name': {'required': True, 'allow_blank': False}}

    def validate_email(self, value):
        email = User.objects.normalize_email(value).strip()
        if User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError("An account with this email already exists.")
        return email

    def create(self, validated_data):
        return User.objects.create_user(**validated_data)
