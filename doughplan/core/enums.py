"""
doughplan Core Enumerations

All enumeration types used throughout the doughplan engine.
"""

from enum import Enum, IntEnum


class IngredientCategory(str, Enum):
    """
    Closed taxonomy of ingredient categories.

    Shared by the percentage engine, the mixing classifier and the
    step generator.
    """
    FLOUR = "FLOUR"
    LIQUID = "LIQUID"
    ENRICHMENT = "ENRICHMENT"        # fats, eggs, dairy solids
    SWEETENER = "SWEETENER"
    LEAVENING = "LEAVENING"          # yeast, chemical leaveners
    SEASONING = "SEASONING"          # salt
    FLAVORING = "FLAVORING"
    CONDITIONER = "CONDITIONER"      # ascorbic acid, gluten, enzymes
    MIXIN = "MIXIN"                  # nuts, fruit, chocolate
    PREFERMENT = "PREFERMENT"


class PrefermentType(str, Enum):
    """Preferment styles."""
    POOLISH = "POOLISH"
    BIGA = "BIGA"
    LEVAIN = "LEVAIN"
    PATE_FERMENTEE = "PATE_FERMENTEE"
    SPONGE = "SPONGE"
    CUSTOM = "CUSTOM"


class ProcessStage(str, Enum):
    """
    Production process stages.

    PF_* stages belong to a preferment's own build track.
    """
    PREFERMENT_BUILD = "PREFERMENT_BUILD"
    PF_MIX = "PF_MIX"
    PF_FEED = "PF_FEED"
    PF_FERMENT = "PF_FERMENT"
    AUTOLYSE = "AUTOLYSE"
    FERMENTOLYSE = "FERMENTOLYSE"
    MIXING = "MIXING"
    BULK_FERMENT = "BULK_FERMENT"
    FOLD = "FOLD"
    DIVIDE = "DIVIDE"
    PRESHAPE = "PRESHAPE"
    REST = "REST"
    SHAPE = "SHAPE"
    PROOF = "PROOF"
    RETARD = "RETARD"
    BAKE = "BAKE"
    COOL = "COOL"
    FINISH = "FINISH"


class MixingPhase(IntEnum):
    """
    Mixing order phases.

    Development is an implicit transition between INCORPORATION and
    FAT_ADDITION, not a phase ingredients are classified into.
    """
    AUTOLYSE = 0        # flour + water + liquid preferments
    INCORPORATION = 1   # salt, yeast, stiff preferments, eggs, oils
    FAT_ADDITION = 2    # high-fat enrichments, high-sugar sweeteners
    MIXIN = 3           # after development, 1st speed only


class DoughType(str, Enum):
    """The 13 dough types a recipe may declare."""
    LEAN = "LEAN"
    ENRICHED = "ENRICHED"
    RICH = "RICH"
    LAMINATED_YEASTED = "LAMINATED_YEASTED"
    LAMINATED = "LAMINATED"
    SOURDOUGH = "SOURDOUGH"
    PIZZA = "PIZZA"
    FLATBREAD = "FLATBREAD"
    SHORTCRUST = "SHORTCRUST"
    SWEET_PASTRY = "SWEET_PASTRY"
    CHOUX = "CHOUX"
    COOKIE = "COOKIE"
    PASTA = "PASTA"


class ComponentType(str, Enum):
    """Non-dough preparations that get their own step templates."""
    TOPPING = "TOPPING"
    GLAZE = "GLAZE"
    FILLING = "FILLING"
    SAUCE = "SAUCE"


class MixType(str, Enum):
    """Mixing methods, keyed by their display names."""
    SHORT_MIX = "Short Mix"
    IMPROVED_MIX = "Improved Mix"
    INTENSIVE_MIX = "Intensive Mix"
    SHORT_IMPROVED = "Short Improved"


class MixerType(str, Enum):
    """Mixer hardware families."""
    SPIRAL = "SPIRAL"
    PLANETARY = "PLANETARY"
    FORK = "FORK"
    HAND = "HAND"


class TimelineMode(str, Enum):
    """Anchor interpretation for timeline scheduling."""
    FORWARD = "forward"   # anchor is the main mix time
    REVERSE = "reverse"   # anchor is the finish time


class TrackType(str, Enum):
    """Timeline track kinds."""
    MAIN = "main"
    PREFERMENT = "preferment"
    COMPANION = "companion"


class CompanionRole(str, Enum):
    """How a companion recipe is used by the main recipe."""
    FILLING = "filling"
    GLAZE = "glaze"
    TOPPING = "topping"
    SAUCE = "sauce"
    GARNISH = "garnish"
    OTHER = "other"
