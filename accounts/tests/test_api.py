# accounts/tests/test_api.py
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from rest_framework.test import APIClient

from accounts import roles
from accounts.models import User
from common.tests.fixtures import TerritoireMixin, creer_utilisateur


class TerritorialAccessAPITestCase(TerritoireMixin, TestCase):
    """Endpoints /api/territorial-access/"""

    def setUp(self):
        self.client = APIClient()
        self.superviseur = creer_utilisateur(
            'sup.lekie@elections.cm', roles.SUPERVISEUR_DEPARTEMENTAL, departements=[self.lekie]
        )
        self.observateur = creer_utilisateur(
            'obs.lekie@elections.cm', roles.OBSERVATEUR_LOCAL, departements=[self.lekie]
        )
        self.client.force_authenticate(self.superviseur)

    def test_summary(self):
        response = self.client.get('/api/territorial-access/summary/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['email'], 'sup.lekie@elections.cm')
        self.assertEqual([d['code'] for d in response.data['departements']], [self.lekie.code])
        self.assertEqual(response.data['totaux']['bureaux_vote'], 1)

    def test_department(self):
        response = self.client.get(f'/api/territorial-access/department/{self.lekie.code}/')
        self.assertEqual(response.data, {'hasAccess': True})

        response = self.client.get(f'/api/territorial-access/department/{self.mfoundi.code}/')
        self.assertEqual(response.data, {'hasAccess': False})

    def test_code_inconnu(self):
        response = self.client.get('/api/territorial-access/department/999/')
        self.assertEqual(response.status_code, 404)

    def test_arrondissement_et_bureau(self):
        response = self.client.get(f'/api/territorial-access/arrondissement/{self.monatele.code}/')
        self.assertTrue(response.data['hasAccess'])

        response = self.client.get(f'/api/territorial-access/bureau-vote/{self.bv_douala.code}/')
        self.assertFalse(response.data['hasAccess'])

    def test_can_edit(self):
        response = self.client.get(f'/api/territorial-access/can-edit-bureau-vote/{self.bv_monatele.code}/')
        self.assertEqual(response.data, {'canEdit': True})

        self.client.force_authenticate(self.observateur)
        response = self.client.get(f'/api/territorial-access/can-edit-department/{self.lekie.code}/')
        self.assertEqual(response.data, {'canEdit': False})

        response = self.client.get(
            f'/api/territorial-access/can-edit-participation-commune/{self.monatele.code}/'
        )
        self.assertEqual(response.data, {'canEdit': False})

    def test_authentification_requise(self):
        self.client.force_authenticate(None)
        response = self.client.get('/api/territorial-access/summary/')
        self.assertIn(response.status_code, (401, 403))


class CreateAdministrateurTestCase(TestCase):
    """Commande create_administrateur"""

    def test_creation(self):
        call_command(
            'create_administrateur', email='chef@elections.cm', password='secret123',
            stdout=StringIO()
        )

        user = User.objects.get(email='chef@elections.cm')
        self.assertEqual(user.role, roles.ADMINISTRATEUR)
        self.assertTrue(user.check_password('secret123'))

    def test_email_existant(self):
        call_command('create_administrateur', password='secret123', stdout=StringIO())

        with self.assertRaises(CommandError):
            call_command('create_administrateur', password='secret123', stdout=StringIO())
