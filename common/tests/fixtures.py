# common/tests/fixtures.py
"""
Jeux de données partagés par les tests.

Deux régions : Centre (Mfoundi, Lekié) et Littoral (Wouri), un
arrondissement et deux bureaux de vote par département.
"""
from accounts import roles
from accounts.models import (
    User, UtilisateurArrondissement, UtilisateurBureauVote, UtilisateurDepartement
)
from geography.models import Arrondissement, BureauVote, Departement, Region
from resultats.models import PartiPolitique


class TerritoireMixin:
    """À combiner avec TestCase : crée la hiérarchie territoriale et les partis"""

    @classmethod
    def setUpTestData(cls):
        super().setUpTestData()

        cls.centre = Region.objects.create(code=1, libelle='Centre', chef_lieu='Yaoundé')
        cls.littoral = Region.objects.create(code=2, libelle='Littoral', chef_lieu='Douala')

        cls.mfoundi = Departement.objects.create(code=101, libelle='Mfoundi', region=cls.centre)
        cls.lekie = Departement.objects.create(code=102, libelle='Lekié', region=cls.centre)
        cls.wouri = Departement.objects.create(code=201, libelle='Wouri', region=cls.littoral)

        cls.yaounde_1 = Arrondissement.objects.create(
            code=10101, libelle='Yaoundé 1er', departement=cls.mfoundi
        )
        cls.monatele = Arrondissement.objects.create(
            code=10201, libelle='Monatélé', departement=cls.lekie
        )
        cls.douala_1 = Arrondissement.objects.create(
            code=20101, libelle='Douala 1er', departement=cls.wouri
        )

        cls.bv_yaounde_a = BureauVote.objects.create(
            code=1010101, designation='École publique Bastos A', arrondissement=cls.yaounde_1,
            effectif=500
        )
        cls.bv_yaounde_b = BureauVote.objects.create(
            code=1010102, designation='École publique Bastos B', arrondissement=cls.yaounde_1,
            effectif=400
        )
        cls.bv_monatele = BureauVote.objects.create(
            code=1020101, designation='Mairie de Monatélé', arrondissement=cls.monatele,
            effectif=300
        )
        cls.bv_douala = BureauVote.objects.create(
            code=2010101, designation='Lycée Joss', arrondissement=cls.douala_1,
            effectif=600
        )

        cls.parti_a = PartiPolitique.objects.create(designation='Parti A', abbreviation='PA')
        cls.parti_b = PartiPolitique.objects.create(designation='Parti B', abbreviation='PB')


def creer_utilisateur(email, role, region=None, departements=(), arrondissements=(),
                      bureaux=(), **extra):
    """Crée un utilisateur et ses affectations territoriales"""
    user = User.objects.create_user(
        email=email,
        password='test123',
        first_name=extra.pop('first_name', 'Test'),
        last_name=extra.pop('last_name', role.title()),
        role=role,
        region=region,
        **extra
    )
    for departement in departements:
        UtilisateurDepartement.objects.create(user=user, departement=departement)
    for arrondissement in arrondissements:
        UtilisateurArrondissement.objects.create(user=user, arrondissement=arrondissement)
    for bureau in bureaux:
        UtilisateurBureauVote.objects.create(user=user, bureau_vote=bureau)
    return user


def creer_administrateur(email='admin@elections.cm'):
    return creer_utilisateur(email, roles.ADMINISTRATEUR)
