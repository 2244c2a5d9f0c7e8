# accounts/models.py
import uuid

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.core.exceptions import ValidationError
from django.db import models

from accounts import roles
from accounts.access import TerritorialAccessMixin


# ============================================================
# MANAGERS PERSONNALISÉS
# ============================================================

class UserManager(BaseUserManager):
    """Manager personnalisé pour le modèle User"""

    def create_user(self, email, password=None, **extra_fields):
        """Créer et sauvegarder un utilisateur normal"""
        if not email:
            raise ValueError("L'email est obligatoire")

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """Créer et sauvegarder un superuser"""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', roles.ADMINISTRATEUR)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser doit avoir is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser doit avoir is_superuser=True.')

        return self.create_user(email, password, **extra_fields)


# ============================================================
# MODÈLE USER
# ============================================================

class User(TerritorialAccessMixin, AbstractUser):
    """
    Utilisateur avec rôle et affectations territoriales.

    Les affectations (département, arrondissement, bureau de vote) sont
    portées par des tables dédiées ; seule la région éventuelle d'un
    superviseur régional est stockée sur l'utilisateur.
    """

    ROLE_CHOICES = roles.ROLE_CHOICES

    # Remplacer username par email comme identifiant principal
    username = models.CharField(max_length=150, unique=True, blank=True, null=True)
    email = models.EmailField(unique=True, verbose_name="Email")
    telephone = models.CharField(max_length=20, blank=True, null=True)

    role = models.CharField(
        max_length=30,
        choices=ROLE_CHOICES,
        default=roles.OBSERVATEUR_LOCAL
    )

    region = models.ForeignKey(
        'geography.Region',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='users',
        help_text="Région supervisée (superviseur régional)"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['first_name', 'last_name']

    class Meta:
        db_table = 'users'
        verbose_name = 'Utilisateur'
        verbose_name_plural = 'Utilisateurs'
        ordering = ['-date_joined']
        indexes = [
            models.Index(fields=['role', 'is_active']),
            models.Index(fields=['region', 'role']),
        ]

    def __str__(self):
        return f"{self.nom_complet} ({self.get_role_display()})"

    def save(self, *args, **kwargs):
        # Auto-générer username depuis email si non fourni
        if not self.username:
            self.username = self.email

        self.clean()

        super().save(*args, **kwargs)

    def clean(self):
        super().clean()

        if self.role == roles.SUPERVISEUR_REGIONAL and not self.region_id:
            raise ValidationError({
                'region': "Un superviseur régional doit être affecté à une région"
            })

    # ========== PROPRIÉTÉS ==========

    @property
    def nom_complet(self):
        """Retourne le nom complet"""
        return self.get_full_name() or self.email

    def a_permission(self, entite, action):
        """Vérifie la matrice de permissions du rôle"""
        if self.is_superuser:
            return True
        return roles.has_permission(self.role, entite, action)


# ============================================================
# AFFECTATIONS TERRITORIALES
# ============================================================

class BaseAffectation(models.Model):
    date_affectation = models.DateTimeField(auto_now_add=True)
    affecte_par = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )

    class Meta:
        abstract = True


class UtilisateurDepartement(BaseAffectation):
    """Affectation d'un utilisateur à un département"""
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='affectations_departement')
    departement = models.ForeignKey(
        'geography.Departement',
        on_delete=models.CASCADE,
        related_name='affectations'
    )

    class Meta:
        db_table = 'utilisateur_departements'
        unique_together = ['user', 'departement']
        verbose_name = 'Affectation département'

    def __str__(self):
        return f"{self.user} → {self.departement}"


class UtilisateurArrondissement(BaseAffectation):
    """Affectation d'un utilisateur à un arrondissement"""
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='affectations_arrondissement')
    arrondissement = models.ForeignKey(
        'geography.Arrondissement',
        on_delete=models.CASCADE,
        related_name='affectations'
    )

    class Meta:
        db_table = 'utilisateur_arrondissements'
        unique_together = ['user', 'arrondissement']
        verbose_name = 'Affectation arrondissement'

    def __str__(self):
        return f"{self.user} → {self.arrondissement}"


class UtilisateurBureauVote(BaseAffectation):
    """Affectation d'un utilisateur à un bureau de vote"""
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='affectations_bureau_vote')
    bureau_vote = models.ForeignKey(
        'geography.BureauVote',
        on_delete=models.CASCADE,
        related_name='affectations'
    )

    class Meta:
        db_table = 'utilisateur_bureaux_vote'
        unique_together = ['user', 'bureau_vote']
        verbose_name = 'Affectation bureau de vote'

    def __str__(self):
        return f"{self.user} → {self.bureau_vote}"


# ============================================================
# AUDIT
# ============================================================

class AuditLog(models.Model):
    """Log d'audit pour tracer toutes les actions importantes"""

    ACTION_CHOICES = [
        ('USER_CREATE', 'Création utilisateur'),
        ('AFFECTATION', 'Affectation territoriale'),
        ('HTTP_POST', 'Requête POST'),
        ('WORKFLOW', 'Changement de statut'),
        ('SAISIE_FORCEE', 'Saisie forcée malgré incohérences'),
        ('REDRESSEMENT', 'Redressement appliqué'),
        ('PV_UPLOAD', 'Téléversement PV'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='audit_logs')
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    description = models.TextField()
    target_model = models.CharField(max_length=50, blank=True, null=True)
    target_id = models.CharField(max_length=100, blank=True, null=True)
    details = models.JSONField(default=dict, blank=True)
    timestamp = models.DateTimeField(auto_now_add=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-timestamp']
        verbose_name = 'Log d\'audit'
        verbose_name_plural = 'Logs d\'audit'

    def __str__(self):
        return f"{self.user.nom_complet if self.user else 'Système'} - {self.get_action_display()}"

    @classmethod
    def log(cls, action, description, user=None, target=None, details=None, ip_address=None,
            target_model=None, target_id=None):
        """Enregistre une entrée d'audit"""
        if target is not None:
            target_model = target_model or target.__class__.__name__
            target_id = target_id or str(target.pk)

        return cls.objects.create(
            user=user,
            action=action,
            description=description,
            target_model=target_model,
            target_id=target_id,
            details=details or {},
            ip_address=ip_address,
        )
