# scripts/init_db.py
import os
import sys

import django

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'electoral_data.settings.development')
django.setup()

from django.contrib.auth import get_user_model
from django.core.management import call_command

from accounts import roles
from accounts.models import UtilisateurDepartement
from geography.models import Departement, Region
from resultats.models import Candidat, PartiPolitique

User = get_user_model()


def create_superuser():
    """Créer un superutilisateur"""
    if not User.objects.filter(email='admin@elections.cm').exists():
        User.objects.create_superuser(
            email='admin@elections.cm',
            password='Admin@123',
            first_name='Admin',
            last_name='Elections',
        )
        print("✓ Superutilisateur créé")


def create_territoires():
    """Charger le découpage territorial fourni"""
    call_command('load_territoires')
    print(f"✓ {Region.objects.count()} régions chargées")


def create_partis():
    """Créer des partis et candidats de test"""
    partis = [
        {'designation': 'Parti Alpha', 'abbreviation': 'PA', 'couleur': '#1F77B4'},
        {'designation': 'Parti Beta', 'abbreviation': 'PB', 'couleur': '#FF7F0E'},
        {'designation': 'Parti Gamma', 'abbreviation': 'PG', 'couleur': '#2CA02C'},
    ]

    for numero, data in enumerate(partis, start=1):
        parti, _ = PartiPolitique.objects.get_or_create(
            designation=data['designation'], defaults=data
        )
        Candidat.objects.get_or_create(
            parti=parti, defaults={'nom': f"Candidat {data['abbreviation']}", 'numero_ordre': numero}
        )

    print("✓ Partis et candidats de test créés")


def create_utilisateurs():
    """Un utilisateur de test par rôle"""
    centre = Region.objects.filter(code=1).first()
    mfoundi = Departement.objects.filter(code=101).first()

    comptes = [
        ('superviseur.centre@elections.cm', roles.SUPERVISEUR_REGIONAL, {'region': centre}),
        ('superviseur.mfoundi@elections.cm', roles.SUPERVISEUR_DEPARTEMENTAL, {}),
        ('validateur.mfoundi@elections.cm', roles.VALIDATEUR, {}),
        ('observateur.mfoundi@elections.cm', roles.OBSERVATEUR_LOCAL, {}),
    ]

    for email, role, extra in comptes:
        if User.objects.filter(email=email).exists():
            continue
        if role == roles.SUPERVISEUR_REGIONAL and centre is None:
            continue

        user = User.objects.create_user(
            email=email, password='Test@123', first_name='Test', last_name=role.title(),
            role=role, **extra
        )
        if mfoundi is not None and role != roles.SUPERVISEUR_REGIONAL:
            UtilisateurDepartement.objects.create(user=user, departement=mfoundi)

    print("✓ Utilisateurs de test créés")


if __name__ == '__main__':
    print("Initialisation de la base de données...")
    create_superuser()
    create_territoires()
    create_partis()
    create_utilisateurs()
    print("✓ Initialisation terminée")
