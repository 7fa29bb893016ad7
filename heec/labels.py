"""Display metadata for the enumerated types.

Each mapping is keyed by every member of its enum; ``tests/test_labels.py``
fails as soon as a member is added without its entries.
"""
from __future__ import annotations

from .models import ActionType, EntityType, RoleType, SeanceType


ROLE_LABELS: dict[RoleType, str] = {
    RoleType.ENSEIGNANT: "Enseignant",
    RoleType.ADMINISTRATEUR: "Administrateur",
    RoleType.CHEF_DE_FILIERE: "Chef de filière",
    RoleType.CHEF_DE_DEPARTEMENT: "Chef de département",
    RoleType.DIRECTEUR_GENERAL: "Directeur général",
}

ROLE_DESCRIPTIONS: dict[RoleType, str] = {
    RoleType.ENSEIGNANT: "Peut enseigner des modules et gérer ses séances",
    RoleType.ADMINISTRATEUR: "Accès complet à l'administration du système",
    RoleType.CHEF_DE_FILIERE: "Gère une filière spécifique et ses modules",
    RoleType.CHEF_DE_DEPARTEMENT: "Gère un département et ses filières",
    RoleType.DIRECTEUR_GENERAL: "Accès complet à tous les départements",
}

ROLE_COLORS: dict[RoleType, str] = {
    RoleType.ENSEIGNANT: "#2563eb",
    RoleType.ADMINISTRATEUR: "#9333ea",
    RoleType.CHEF_DE_FILIERE: "#ea580c",
    RoleType.CHEF_DE_DEPARTEMENT: "#4f46e5",
    RoleType.DIRECTEUR_GENERAL: "#dc2626",
}

ROLE_ICONS: dict[RoleType, str] = {
    RoleType.ENSEIGNANT: "user",
    RoleType.ADMINISTRATEUR: "settings",
    RoleType.CHEF_DE_FILIERE: "graduation-cap",
    RoleType.CHEF_DE_DEPARTEMENT: "building",
    RoleType.DIRECTEUR_GENERAL: "crown",
}

SEANCE_TYPE_LABELS: dict[SeanceType, str] = {
    SeanceType.COURS: "Cours magistral",
    SeanceType.TD: "Travaux dirigés",
    SeanceType.TP: "Travaux pratiques",
    SeanceType.EXAMEN: "Examen",
    SeanceType.CONFERENCE: "Conférence",
    SeanceType.SEMINAIRE: "Séminaire",
}

SEANCE_TYPE_COLORS: dict[SeanceType, str] = {
    SeanceType.COURS: "#2563eb",
    SeanceType.TD: "#16a34a",
    SeanceType.TP: "#9333ea",
    SeanceType.EXAMEN: "#dc2626",
    SeanceType.CONFERENCE: "#ea580c",
    SeanceType.SEMINAIRE: "#ca8a04",
}

ACTION_LABELS: dict[ActionType, str] = {
    ActionType.CREATE: "Création",
    ActionType.UPDATE: "Modification",
    ActionType.DELETE: "Suppression",
    ActionType.LOGIN: "Connexion",
    ActionType.LOGOUT: "Déconnexion",
    ActionType.ASSIGN: "Affectation",
    ActionType.UNASSIGN: "Désaffectation",
    ActionType.ACTIVATE: "Activation",
    ActionType.DEACTIVATE: "Désactivation",
}

ACTION_COLORS: dict[ActionType, str] = {
    ActionType.CREATE: "green",
    ActionType.UPDATE: "blue",
    ActionType.DELETE: "red",
    ActionType.LOGIN: "purple",
    ActionType.LOGOUT: "gray",
    ActionType.ASSIGN: "orange",
    ActionType.UNASSIGN: "yellow",
    ActionType.ACTIVATE: "emerald",
    ActionType.DEACTIVATE: "rose",
}

ENTITY_LABELS: dict[EntityType, str] = {
    EntityType.USER: "Utilisateur",
    EntityType.ROLE: "Rôle",
    EntityType.DEPARTEMENT: "Département",
    EntityType.FILIERE: "Filière",
    EntityType.MODULE: "Module",
    EntityType.SEANCE: "Séance",
}

ENTITY_COLORS: dict[EntityType, str] = {
    EntityType.USER: "blue",
    EntityType.ROLE: "purple",
    EntityType.DEPARTEMENT: "green",
    EntityType.FILIERE: "orange",
    EntityType.MODULE: "red",
    EntityType.SEANCE: "yellow",
}


def role_label(role_type: RoleType) -> str:
    return ROLE_LABELS[role_type]


def role_description(role_type: RoleType) -> str:
    return ROLE_DESCRIPTIONS[role_type]


def role_color(role_type: RoleType) -> str:
    return ROLE_COLORS[role_type]


def role_icon(role_type: RoleType) -> str:
    return ROLE_ICONS[role_type]


def seance_type_label(seance_type: SeanceType) -> str:
    return SEANCE_TYPE_LABELS[seance_type]


def action_label(action: ActionType) -> str:
    return ACTION_LABELS[action]


def entity_label(entity_type: EntityType) -> str:
    return ENTITY_LABELS[entity_type]
