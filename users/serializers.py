"""
Serializers for registration, login and profile management
"""

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from tryon_backend.choices import BodyGender, BodyType

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Outward representation of an account; never exposes secrets."""
    profileImage = serializers.URLField(source='profile_image_url', read_only=True)
    bodyInfo = serializers.SerializerMethodField()
    favorites = serializers.PrimaryKeyRelatedField(many=True, read_only=True)
    isBlocked = serializers.BooleanField(source='is_blocked', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = User
        fields = (
            'id', 'name', 'email', 'role', 'profileImage', 'bodyInfo',
            'favorites', 'isBlocked', 'createdAt', 'updatedAt',
        )
        read_only_fields = fields

    def get_bodyInfo(self, obj):
        return obj.body_info


class RegistrationSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=50, trim_whitespace=True)
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={'input_type': 'password'},
    )

    def validate_email(self, value):
        value = value.strip().lower()
        if User.objects.filter(email=value).exists():
            raise serializers.ValidationError("Email already registered")
        return value

    def create(self, validated_data):
        return User.objects.create_user(
            email=validated_data['email'],
            password=validated_data['password'],
            name=validated_data['name'],
        )


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})

    def validate_email(self, value):
        return value.strip().lower()


class ForgotPasswordSerializer(serializers.Serializer):
    email = serializers.EmailField()

    def validate_email(self, value):
        return value.strip().lower()


class ResetPasswordSerializer(serializers.Serializer):
    token = serializers.CharField()
    password = serializers.CharField(write_only=True, validators=[validate_password])


class BodyInfoSerializer(serializers.Serializer):
    gender = serializers.ChoiceField(choices=BodyGender.choices, required=False, allow_null=True)
    height = serializers.IntegerField(min_value=50, max_value=300, required=False, allow_null=True)
    bodyType = serializers.ChoiceField(choices=BodyType.choices, required=False, allow_null=True)


class ProfileUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=50, required=False)
    bodyInfo = BodyInfoSerializer(required=False)

    def update(self, instance, validated_data):
        updated = []
        if validated_data.get('name'):
            instance.name = validated_data['name']
            updated.append('name')
        body = validated_data.get('bodyInfo')
        if body is not None:
            # merge with the stored profile, only touching supplied keys
            if 'gender' in body:
                instance.body_gender = body['gender']
            if 'height' in body:
                instance.body_height_cm = body['height']
            if 'bodyType' in body:
                instance.body_type = body['bodyType']
            updated.append('bodyInfo')
        instance.save()
        self.updated_fields = updated
        return instance


class ChangePasswordSerializer(serializers.Serializer):
    currentPassword = serializers.CharField(write_only=True)
    newPassword = serializers.CharField(write_only=True, validators=[validate_password])


class DeleteAccountSerializer(serializers.Serializer):
    password = serializers.CharField(write_only=True)
