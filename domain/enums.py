from enum import Enum


class Transaction(Enum):
    """Transaction types accepted by the classifieds API."""

    DEMISE = "B"
    BUSINESS = "F"
    SALE_OF_CONSTRUCTION_DEVELOPER = "G"  # developer ("promoteur") listings
    SALE_OF_CONSTRUCTION_BUILDER = "H"  # detached house builder listings
    AUCTION = "I"
    REAL_ESTATE_SERVICES = "J"
    RENT = "L"
    SALE_OR_RENT = "M"
    RENT_SAILING = "P"
    SEASONAL_RENT = "S"
    SALE = "V"
    LIFE_ANNUITY = "W"
    RENT_APPLICATION = "Z"

    @property
    def code(self) -> str:
        return self.value


class Universe(Enum):
    """Top-level verticals scoping portal listings."""

    EDITO = "EDITO"
    IMMO = "IMMO"
    NAUTICAL = "NAUT"
    VEHICLES = "VO"

    @property
    def code(self) -> str:
        return self.value


class DataKey(Enum):
    """Extension attributes that can be attached to an ad."""

    REFERENCE = "reference"
    TITLE = "titre"
    POSTAL_CODE = "code_postal"
    CITY = "ville"
    ENTRY_DATE = "date_saisie"
    PHONE_TO_DISPLAY = "telephone_a_afficher"
    RENTAL_CHARGES = "charges_locatives"
    MONTHLY_RENT = "loyer_mensuel"
    MONTHLY_RENT_INCLUDING_CHARGES = "loyer_mensuel_cc"
    RENT_INCLUDES_CHARGES = "loyer_est_cc"
    BALCONY = "balcon"
    SWIMMING_POOL = "piscine"
    LIFT = "ascenseur"
    LIVING_AREA = "surface_habitable"
    ROOMS = "nb_pieces_logement"
    BEDROOMS = "nombre_de_chambres"

    @property
    def code(self) -> str:
        return self.value
