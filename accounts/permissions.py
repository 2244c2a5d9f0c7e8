# accounts/permissions.py
from rest_framework import permissions

from accounts import roles


class HasEntityPermission(permissions.BasePermission):
    """
    Vérifie la matrice de permissions du rôle pour l'entité de la vue,
    puis l'accès territorial à l'objet manipulé.

    La vue déclare `entite` (voir accounts.roles) et, pour les contrôles
    objet, une méthode `get_territoire(obj)`.
    """

    actions_vue = {
        'list': roles.LIRE,
        'retrieve': roles.LIRE,
        'historique': roles.LIRE,
        'create': roles.CREER,
        'update': roles.MODIFIER,
        'partial_update': roles.MODIFIER,
        'destroy': roles.SUPPRIMER,
        'valider': roles.VALIDER,
        'bulk_valider': roles.VALIDER,
        'approuver': roles.APPROUVER,
        'bulk_approuver': roles.APPROUVER,
        'rejeter': roles.REJETER,
        'bulk_rejeter': roles.REJETER,
    }

    message = "Votre rôle ne permet pas cette action."

    def get_action(self, request, view):
        action = getattr(view, 'action', None)
        actions = {**self.actions_vue, **getattr(view, 'actions_permissions', {})}
        if action in actions:
            return actions[action]
        return roles.LIRE if request.method in permissions.SAFE_METHODS else roles.MODIFIER

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.a_permission(view.entite, self.get_action(request, view))

    def has_object_permission(self, request, view, obj):
        user = request.user
        territoire = view.get_territoire(obj)

        if self.get_action(request, view) == roles.LIRE:
            return user.peut_acceder_territoire(territoire)
        return user.peut_editer_territoire(territoire)
