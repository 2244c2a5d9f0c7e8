# resultats/tests/test_resultats.py
from django.test import TestCase
from rest_framework.test import APIClient

from accounts import roles
from accounts.models import AuditLog
from common.tests.fixtures import TerritoireMixin, creer_administrateur, creer_utilisateur
from participation.models import ParticipationBureauVote
from participation.services.validation_service import validation_service
from resultats.models import (
    RedressementBureauVote, RedressementCandidat, ResultatBureauVote, ResultatDepartement
)


class ResultatDepartementTestCase(TerritoireMixin, TestCase):
    """Pourcentages des partis dans un département"""

    url = '/api/resultats-departement/'

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(creer_administrateur())

    def pourcentages(self):
        return dict(
            ResultatDepartement.objects.filter(departement=self.wouri).values_list('parti_id', 'pourcentage')
        )

    def test_recalcul_a_chaque_saisie(self):
        response = self.client.post(self.url, {
            'departement': self.wouri.code, 'parti': self.parti_a.pk, 'nombre_vote': 300
        })
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['pourcentage'], 100.0)

        response = self.client.post(self.url, {
            'departement': self.wouri.code, 'parti': self.parti_b.pk, 'nombre_vote': 100
        })
        self.assertEqual(response.data['pourcentage'], 25.0)
        self.assertEqual(self.pourcentages(), {self.parti_a.pk: 75.0, self.parti_b.pk: 25.0})

    def test_recalcul_apres_suppression(self):
        ResultatDepartement.objects.create(departement=self.wouri, parti=self.parti_a, nombre_vote=300)
        resultat_b = ResultatDepartement.objects.create(
            departement=self.wouri, parti=self.parti_b, nombre_vote=100
        )

        response = self.client.delete(f'{self.url}{resultat_b.pk}/')

        self.assertEqual(response.status_code, 204)
        self.assertEqual(self.pourcentages(), {self.parti_a.pk: 100.0})

    def test_departements_independants(self):
        ResultatDepartement.objects.create(departement=self.wouri, parti=self.parti_a, nombre_vote=300)
        ResultatDepartement.objects.create(departement=self.lekie, parti=self.parti_a, nombre_vote=50)
        ResultatDepartement.objects.create(departement=self.lekie, parti=self.parti_b, nombre_vote=50)

        self.assertEqual(self.pourcentages(), {self.parti_a.pk: 100.0})

    def test_workflow(self):
        resultat = ResultatDepartement.objects.create(
            departement=self.wouri, parti=self.parti_a, nombre_vote=300
        )

        response = self.client.post(f'{self.url}{resultat.pk}/valider/')
        self.assertEqual(response.data['statut'], 'VALIDE')

        response = self.client.post(f'{self.url}{resultat.pk}/approuver/')
        self.assertEqual(response.data['statut'], 'APPROUVE')


class ResultatBureauVoteTestCase(TerritoireMixin, TestCase):
    """Saisie des voix par bureau, croisée avec la participation"""

    url = '/api/resultats-bureau/'

    def setUp(self):
        self.client = APIClient()
        self.scrutateur = creer_utilisateur(
            'scrutateur@elections.cm', roles.SCRUTATEUR, bureaux=[self.bv_yaounde_a]
        )
        self.client.force_authenticate(self.scrutateur)
        ParticipationBureauVote.objects.create(
            bureau_vote=self.bv_yaounde_a, nombre_inscrit=500, nombre_votant=300, bulletin_nul=12
        )

    def test_saisie_coherente(self):
        response = self.client.post(self.url, {
            'bureau_vote': self.bv_yaounde_a.code, 'parti': self.parti_a.pk, 'nombre_vote': 150
        })

        self.assertEqual(response.status_code, 201)
        self.assertFalse(response.data['has_incoherence'])
        # 150 voix sur 288 exprimés : écart signalé
        self.assertEqual(len(response.data['avertissements']), 1)

    def test_total_depasse_les_exprimes(self):
        ResultatBureauVote.objects.create(bureau_vote=self.bv_yaounde_a, parti=self.parti_a, nombre_vote=200)

        response = self.client.post(self.url, {
            'bureau_vote': self.bv_yaounde_a.code, 'parti': self.parti_b.pk, 'nombre_vote': 100
        })
        self.assertEqual(response.status_code, 400)
        self.assertTrue(response.data['details']['erreurs'])

        response = self.client.post(self.url, {
            'bureau_vote': self.bv_yaounde_a.code, 'parti': self.parti_b.pk, 'nombre_vote': 100,
            'forcer': True,
        })
        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.data['has_incoherence'])

    def test_bureau_hors_perimetre(self):
        response = self.client.post(self.url, {
            'bureau_vote': self.bv_douala.code, 'parti': self.parti_a.pk, 'nombre_vote': 10
        })
        self.assertEqual(response.status_code, 400)


class RedressementTestCase(TerritoireMixin, TestCase):
    """Redressements : relevé des valeurs initiales et application à l'approbation"""

    def setUp(self):
        self.client = APIClient()
        self.scrutateur = creer_utilisateur(
            'scrutateur@elections.cm', roles.SCRUTATEUR, bureaux=[self.bv_yaounde_a]
        )
        self.superviseur = creer_utilisateur(
            'sup.mfoundi@elections.cm', roles.SUPERVISEUR_DEPARTEMENTAL, departements=[self.mfoundi]
        )
        self.validateur = creer_utilisateur(
            'validateur@elections.cm', roles.VALIDATEUR, departements=[self.mfoundi]
        )
        self.participation = ParticipationBureauVote.objects.create(
            bureau_vote=self.bv_yaounde_a, nombre_inscrit=500, nombre_votant=300, bulletin_nul=12
        )

    def test_redressement_bureau(self):
        self.client.force_authenticate(self.scrutateur)
        response = self.client.post('/api/redressements-bureau/', {
            'bureau_vote': self.bv_yaounde_a.code,
            'nombre_votant_redresse': 310,
            'suffrage_exprime_redresse': 298,
            'raison_redressement': 'Erreur de report sur le PV',
        })
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['nombre_votant_initial'], 300)
        self.assertEqual(response.data['suffrage_exprime_initial'], 288)
        self.assertEqual(response.data['statut'], 'EN_ATTENTE')
        pk = response.data['id']

        # Le scrutateur ne valide pas
        response = self.client.post(f'/api/redressements-bureau/{pk}/valider/')
        self.assertEqual(response.status_code, 403)

        self.client.force_authenticate(self.superviseur)
        self.client.post(f'/api/redressements-bureau/{pk}/valider/')

        # Pas encore appliqué
        self.participation.refresh_from_db()
        self.assertEqual(self.participation.nombre_votant, 300)

        self.client.force_authenticate(self.validateur)
        response = self.client.post(f'/api/redressements-bureau/{pk}/approuver/')
        self.assertEqual(response.data['statut'], 'APPROUVE')

        self.participation.refresh_from_db()
        self.assertEqual(self.participation.nombre_votant, 310)
        self.assertEqual(self.participation.suffrage_exprime, 298)
        self.assertEqual(self.participation.taux_participation, 62.0)
        self.assertEqual(self.participation.code_modificateur, self.validateur)

    def test_redressement_bureau_incoherent(self):
        self.client.force_authenticate(self.scrutateur)
        response = self.client.post('/api/redressements-bureau/', {
            'bureau_vote': self.bv_yaounde_a.code,
            'nombre_votant_redresse': 600,
            'raison_redressement': 'Recomptage',
        })

        self.assertEqual(response.status_code, 400)
        self.assertFalse(RedressementBureauVote.objects.exists())

    def approuver(self, pk):
        self.client.force_authenticate(self.superviseur)
        self.client.post(f'/api/redressements-bureau/{pk}/valider/')
        self.client.force_authenticate(self.validateur)
        return self.client.post(f'/api/redressements-bureau/{pk}/approuver/')

    def test_redressement_votants_seuls(self):
        """Les exprimés suivent les votants redressés"""
        self.client.force_authenticate(self.scrutateur)
        response = self.client.post('/api/redressements-bureau/', {
            'bureau_vote': self.bv_yaounde_a.code,
            'nombre_votant_redresse': 310,
            'raison_redressement': 'Recomptage des émargements',
        })
        self.assertEqual(response.status_code, 201)
        self.assertFalse(AuditLog.objects.filter(action='SAISIE_FORCEE').exists())

        response = self.approuver(response.data['id'])
        self.assertEqual(response.data['statut'], 'APPROUVE')

        self.participation.refresh_from_db()
        self.assertEqual(self.participation.nombre_votant, 310)
        self.assertEqual(self.participation.suffrage_exprime, 298)
        self.assertFalse(self.participation.has_incoherence)

    def test_redressement_nuls_seuls(self):
        self.client.force_authenticate(self.scrutateur)
        response = self.client.post('/api/redressements-bureau/', {
            'bureau_vote': self.bv_yaounde_a.code,
            'bulletin_nul_redresse': 20,
            'raison_redressement': 'Bulletins nuls mal comptés',
        })
        self.assertEqual(response.status_code, 201)

        self.approuver(response.data['id'])

        self.participation.refresh_from_db()
        self.assertEqual(self.participation.bulletin_nul, 20)
        self.assertEqual(self.participation.suffrage_exprime, 280)

    def test_redressement_inscrits_conserve_exprimes(self):
        """Redresser les inscrits ne touche pas aux exprimés saisis"""
        self.participation.suffrage_exprime = 280
        self.participation.save()

        redressement = RedressementBureauVote.objects.create(
            bureau_vote=self.bv_yaounde_a,
            nombre_inscrit_redresse=520,
            raison_redressement='Liste électorale complétée',
        )
        self.assertFalse(redressement.recalcule_exprimes())

        validation_service.valider(redressement, self.superviseur)
        validation_service.approuver(redressement, self.validateur)

        self.participation.refresh_from_db()
        self.assertEqual(self.participation.nombre_inscrit, 520)
        self.assertEqual(self.participation.suffrage_exprime, 280)

    def test_redressement_sans_participation(self):
        redressement = RedressementBureauVote.objects.create(
            bureau_vote=self.bv_yaounde_b,
            nombre_inscrit_redresse=400,
            nombre_votant_redresse=200,
            bulletin_nul_redresse=10,
            raison_redressement='PV retrouvé',
        )
        self.assertIsNone(redressement.nombre_votant_initial)

        validation_service.valider(redressement, self.superviseur)
        validation_service.approuver(redressement, self.validateur)

        participation = ParticipationBureauVote.objects.get(bureau_vote=self.bv_yaounde_b)
        self.assertEqual(participation.nombre_votant, 200)
        self.assertEqual(participation.suffrage_exprime, 190)

    def test_redressement_candidat(self):
        resultat = ResultatBureauVote.objects.create(
            bureau_vote=self.bv_yaounde_a, parti=self.parti_a, nombre_vote=150
        )
        ResultatBureauVote.objects.create(bureau_vote=self.bv_yaounde_a, parti=self.parti_b, nombre_vote=138)

        redressement = RedressementCandidat.objects.create(
            resultat=resultat, nombre_vote_redresse=140, raison_redressement='Voix mal reportées'
        )
        self.assertEqual(redressement.nombre_vote_initial, 150)

        validation_service.valider(redressement, self.superviseur)
        validation_service.approuver(redressement, self.validateur)

        resultat.refresh_from_db()
        self.assertEqual(resultat.nombre_vote, 140)
        self.assertEqual(redressement.historique.count(), 2)

    def test_rejet_non_applique(self):
        resultat = ResultatBureauVote.objects.create(
            bureau_vote=self.bv_yaounde_a, parti=self.parti_a, nombre_vote=150
        )
        redressement = RedressementCandidat.objects.create(
            resultat=resultat, nombre_vote_redresse=10, raison_redressement='Erreur'
        )

        validation_service.rejeter(redressement, self.validateur, 'Aucune justification')

        resultat.refresh_from_db()
        self.assertEqual(resultat.nombre_vote, 150)
        self.assertEqual(redressement.statut, 'REJETE')
