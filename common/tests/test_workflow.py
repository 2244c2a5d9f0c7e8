# common/tests/test_workflow.py
from django.test import TestCase

from accounts import roles
from common.exceptions import TransitionInvalide
from common.models import HistoriqueValidation
from common.tests.fixtures import TerritoireMixin, creer_utilisateur
from participation.models import ParticipationCommune


class WorkflowTestCase(TerritoireMixin, TestCase):
    """Transitions de statut et historisation"""

    def setUp(self):
        self.validateur = creer_utilisateur(
            'validateur@elections.cm', roles.VALIDATEUR, departements=[self.mfoundi]
        )
        self.saisie = ParticipationCommune.objects.create(
            arrondissement=self.yaounde_1,
            nombre_bureaux=2,
            nombre_inscrits=900,
            nombre_votants=600,
            bulletins_nuls=20,
            suffrages_valables=580,
        )

    def test_statut_initial(self):
        self.assertEqual(self.saisie.statut, 'EN_ATTENTE')
        self.assertFalse(self.saisie.historique.exists())

    def test_valider_puis_approuver(self):
        self.saisie.transitionner('VALIDER', self.validateur, commentaire='RAS')
        self.saisie.save()
        self.assertEqual(self.saisie.statut, 'VALIDE')
        self.assertEqual(self.saisie.validateur, self.validateur)
        self.assertIsNotNone(self.saisie.date_validation)

        self.saisie.transitionner('APPROUVER', self.validateur)
        self.saisie.save()
        self.assertEqual(self.saisie.statut, 'APPROUVE')

        actions = list(self.saisie.historique.values_list('action', flat=True))
        self.assertEqual(actions, ['APPROUVER', 'VALIDER'])

    def test_approuver_sans_validation(self):
        with self.assertRaises(TransitionInvalide):
            self.saisie.transitionner('APPROUVER', self.validateur)
        self.assertEqual(self.saisie.statut, 'EN_ATTENTE')
        self.assertEqual(HistoriqueValidation.objects.count(), 0)

    def test_rejet_depuis_valide(self):
        self.saisie.transitionner('VALIDER', self.validateur)
        historique = self.saisie.transitionner(
            'REJETER', self.validateur, motif_rejet='Chiffres illisibles'
        )
        self.saisie.save()

        self.assertEqual(self.saisie.statut, 'REJETE')
        self.assertEqual(self.saisie.motif_rejet, 'Chiffres illisibles')
        self.assertEqual(historique.ancien_statut, 'VALIDE')
        self.assertEqual(historique.nouveau_statut, 'REJETE')

    def test_aucune_transition_depuis_approuve(self):
        self.saisie.statut = 'APPROUVE'
        for action in ('VALIDER', 'APPROUVER', 'REJETER'):
            self.assertFalse(self.saisie.peut_transitionner(action))

    def test_remettre_en_attente(self):
        self.saisie.transitionner('REJETER', self.validateur, motif_rejet='Doublon')
        historique = self.saisie.remettre_en_attente(self.validateur)

        self.assertEqual(self.saisie.statut, 'EN_ATTENTE')
        self.assertIsNone(self.saisie.motif_rejet)
        self.assertEqual(historique.action, 'CORRIGER')

    def test_remettre_en_attente_ignore_les_autres_statuts(self):
        self.assertIsNone(self.saisie.remettre_en_attente(self.validateur))
        self.assertEqual(self.saisie.statut, 'EN_ATTENTE')
