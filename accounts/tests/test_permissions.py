# accounts/tests/test_permissions.py
from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase

from accounts import roles
from accounts.models import AuditLog, User
from common.tests.fixtures import TerritoireMixin, creer_administrateur, creer_utilisateur
from participation.models import ParticipationBureauVote


class MatriceRolesTestCase(SimpleTestCase):
    """Matrice des permissions par rôle"""

    def test_administrateur(self):
        for entite in roles.ENTITES:
            self.assertTrue(roles.has_permission(roles.ADMINISTRATEUR, entite, roles.APPROUVER))
        self.assertEqual(roles.get_perimetre(roles.ADMINISTRATEUR), roles.PERIMETRE_TOUT)

    def test_superviseurs_ne_peuvent_pas_approuver(self):
        for role in (roles.SUPERVISEUR_REGIONAL, roles.SUPERVISEUR_DEPARTEMENTAL):
            self.assertTrue(roles.has_permission(role, roles.PV, roles.VALIDER))
            self.assertTrue(roles.has_permission(role, roles.PV, roles.REJETER))
            self.assertFalse(roles.has_permission(role, roles.PV, roles.APPROUVER))

    def test_validateur_ne_saisit_pas(self):
        self.assertTrue(roles.has_permission(roles.VALIDATEUR, roles.RESULTAT, roles.APPROUVER))
        self.assertFalse(roles.can_modify_entity(roles.VALIDATEUR, roles.RESULTAT))
        self.assertTrue(roles.can_access_entity(roles.VALIDATEUR, roles.RESULTAT))

    def test_scrutateur(self):
        self.assertTrue(roles.has_permission(roles.SCRUTATEUR, roles.PARTICIPATION, roles.CREER))
        self.assertFalse(roles.has_permission(roles.SCRUTATEUR, roles.PARTICIPATION, roles.VALIDER))
        self.assertFalse(roles.can_modify_entity(roles.SCRUTATEUR, roles.ARRONDISSEMENT))
        self.assertTrue(roles.can_access_entity(roles.SCRUTATEUR, roles.ARRONDISSEMENT))

    def test_observateur_lecture_seule(self):
        for entite in roles.ENTITES:
            self.assertTrue(roles.can_access_entity(roles.OBSERVATEUR_LOCAL, entite))
            self.assertFalse(roles.can_modify_entity(roles.OBSERVATEUR_LOCAL, entite))

    def test_role_inconnu(self):
        self.assertIsNone(roles.get_role_permissions('INCONNU'))
        self.assertFalse(roles.has_permission('INCONNU', roles.PV, roles.LIRE))
        self.assertIsNone(roles.get_perimetre('INCONNU'))


class UserPermissionsTestCase(TerritoireMixin, TestCase):
    """Accès territorial des utilisateurs"""

    def setUp(self):
        self.admin = creer_administrateur()
        self.sup_regional = creer_utilisateur(
            'sup.centre@elections.cm', roles.SUPERVISEUR_REGIONAL, region=self.centre
        )
        self.sup_departemental = creer_utilisateur(
            'sup.wouri@elections.cm', roles.SUPERVISEUR_DEPARTEMENTAL, departements=[self.wouri]
        )
        self.scrutateur = creer_utilisateur(
            'scrutateur@elections.cm', roles.SCRUTATEUR,
            arrondissements=[self.monatele], bureaux=[self.bv_yaounde_a]
        )
        self.observateur = creer_utilisateur(
            'observateur@elections.cm', roles.OBSERVATEUR_LOCAL, departements=[self.mfoundi]
        )

    def test_administrateur_acces_complet(self):
        """L'administrateur accède à tout le territoire"""
        print("\n🧪 Test: Administrateur - Accès complet")

        self.assertTrue(self.admin.a_acces_complet())
        self.assertTrue(self.admin.peut_acceder_departement(self.wouri))
        self.assertTrue(self.admin.peut_editer_bureau_vote(self.bv_douala))
        self.assertTrue(self.admin.peut_acceder_territoire(None))
        self.assertEqual(self.admin.get_bureaux_vote_accessibles().count(), 4)

        print("✅ Administrateur a tous les accès")

    def test_superviseur_regional_cascade(self):
        """La région donne accès à ses départements, arrondissements et bureaux"""
        print("\n🧪 Test: Superviseur régional - Cascade région")

        self.assertFalse(self.sup_regional.a_acces_complet())
        self.assertTrue(self.sup_regional.peut_acceder_departement(self.lekie))
        self.assertTrue(self.sup_regional.peut_acceder_bureau_vote(self.bv_monatele))
        self.assertFalse(self.sup_regional.peut_acceder_departement(self.wouri))
        self.assertFalse(self.sup_regional.peut_acceder_bureau_vote(self.bv_douala))
        self.assertFalse(self.sup_regional.peut_acceder_territoire(None))

        print("✅ Superviseur régional limité à sa région")

    def test_superviseur_regional_sans_region(self):
        with self.assertRaises(ValidationError):
            creer_utilisateur('sans.region@elections.cm', roles.SUPERVISEUR_REGIONAL)

    def test_superviseur_departemental(self):
        self.assertEqual(
            list(self.sup_departemental.get_arrondissements_accessibles()), [self.douala_1]
        )
        self.assertTrue(self.sup_departemental.peut_editer_bureau_vote(self.bv_douala))
        self.assertTrue(self.sup_departemental.peut_acceder_region(self.littoral))
        self.assertFalse(self.sup_departemental.peut_acceder_region(self.centre))

    def test_scrutateur_affectations_directes(self):
        """Le scrutateur voit ses bureaux et ceux de ses arrondissements"""
        bureaux = set(self.scrutateur.get_bureaux_vote_accessibles().values_list('code', flat=True))

        self.assertEqual(bureaux, {self.bv_yaounde_a.code, self.bv_monatele.code})
        self.assertFalse(self.scrutateur.peut_acceder_bureau_vote(self.bv_yaounde_b))
        self.assertFalse(self.scrutateur.peut_acceder_departement(self.mfoundi))

    def test_observateur_ne_peut_pas_editer(self):
        self.assertTrue(self.observateur.peut_acceder_departement(self.mfoundi))
        self.assertFalse(self.observateur.peut_editer_departement(self.mfoundi))
        self.assertFalse(self.observateur.peut_editer_territoire(self.bv_yaounde_a))

    def test_compte_inactif(self):
        self.admin.is_active = False
        self.assertFalse(self.admin.a_acces_complet())

    def test_filtrer_par_territoire(self):
        ParticipationBureauVote.objects.create(
            bureau_vote=self.bv_yaounde_a, nombre_inscrit=500, nombre_votant=300
        )
        ParticipationBureauVote.objects.create(
            bureau_vote=self.bv_douala, nombre_inscrit=600, nombre_votant=400
        )
        queryset = ParticipationBureauVote.objects.all()

        self.assertEqual(self.admin.filtrer_par_territoire(queryset, bureau_vote='bureau_vote').count(), 2)
        filtre = self.sup_departemental.filtrer_par_territoire(queryset, bureau_vote='bureau_vote')
        self.assertEqual([p.bureau_vote_id for p in filtre], [self.bv_douala.code])

        with self.assertRaises(ValueError):
            self.sup_departemental.filtrer_par_territoire(queryset)

    def test_peut_acceder_territoire_type_inconnu(self):
        with self.assertRaises(TypeError):
            self.sup_regional.peut_acceder_territoire(self.parti_a)

    def test_a_permission(self):
        self.assertTrue(self.scrutateur.a_permission(roles.PARTICIPATION, roles.CREER))
        self.assertFalse(self.observateur.a_permission(roles.PARTICIPATION, roles.CREER))

        self.observateur.is_superuser = True
        self.assertTrue(self.observateur.a_permission(roles.PARTICIPATION, roles.CREER))

    def test_resume_acces(self):
        resume = self.scrutateur.resume_acces()

        self.assertEqual(resume['role'], roles.SCRUTATEUR)
        self.assertFalse(resume['acces_complet'])
        self.assertEqual(resume['perimetre'], roles.PERIMETRE_PROPRE)
        self.assertIsNone(resume['region'])
        self.assertEqual([a['code'] for a in resume['arrondissements']], [self.monatele.code])
        self.assertEqual([b['code'] for b in resume['bureaux_vote']], [self.bv_yaounde_a.code])
        self.assertEqual(resume['totaux']['bureaux_vote'], 2)


class UserCreationTestCase(TerritoireMixin, TestCase):
    """Tests de création d'utilisateurs"""

    def test_username_auto_generation(self):
        """Le username reprend l'email"""
        user = User.objects.create_user(
            email='test.user@elections.cm', password='test123', first_name='Test', last_name='User'
        )

        self.assertEqual(user.username, 'test.user@elections.cm')
        self.assertEqual(user.role, roles.OBSERVATEUR_LOCAL)

    def test_create_superuser(self):
        user = User.objects.create_superuser(
            email='root@elections.cm', password='test123', first_name='Root', last_name='User'
        )
        self.assertEqual(user.role, roles.ADMINISTRATEUR)
        self.assertTrue(user.a_acces_complet())

    def test_audit_creation_et_affectation(self):
        user = creer_utilisateur('audit@elections.cm', roles.VALIDATEUR, departements=[self.lekie])

        actions = set(AuditLog.objects.filter(target_id=str(user.pk)).values_list('action', flat=True))
        self.assertEqual(actions, {'USER_CREATE', 'AFFECTATION'})
