"""
process/templates.py - Fixed step templates for non-bread doughs.

Laminated doughs, choux, cookies, pastry crusts, pasta and the simple
components (topping, glaze, filling, sauce) follow a fixed method. The
templates interpolate ingredient names and drop steps whose ingredient
subset is empty.
"""

from __future__ import annotations
from typing import Callable, Dict, List, Optional, Sequence

from ..core.enums import ComponentType, DoughType, IngredientCategory, ProcessStage
from ..core.models import Ingredient, ProcessStep
from ..mixing.patterns import is_egg

CHILL_TEMP_C = 4

DRY_CATEGORIES = (
    IngredientCategory.FLOUR,
    IngredientCategory.LEAVENING,
    IngredientCategory.SEASONING,
    IngredientCategory.CONDITIONER,
)


def make_step(
    stage: ProcessStage,
    title: str,
    description: str,
    duration_min: Optional[float] = None,
    temperature: Optional[float] = None,
    mixer_speed: Optional[int] = None,
    preferment_ingredient_id: Optional[str] = None,
) -> ProcessStep:
    """Build a suggested step with every field set explicitly."""
    return ProcessStep(
        stage=stage,
        title=title,
        description=description,
        duration_min=duration_min,
        temperature=temperature,
        mixer_speed=mixer_speed,
        preferment_ingredient_id=preferment_ingredient_id,
    )


def name_list(ingredients: Sequence[Ingredient]) -> str:
    """Comma-separated ingredient names; "ingredients" for an empty list."""
    names = [i.name for i in ingredients if i.name]
    return ", ".join(names) if names else "ingredients"


class _Subsets:
    """Ingredient subsets the templates draw names from."""

    def __init__(self, ingredients: Sequence[Ingredient]):
        present = [i for i in ingredients if i.base_qty and i.category != IngredientCategory.PREFERMENT]
        self.eggs = [i for i in present if is_egg(i.name)]
        self.fats = [
            i for i in present
            if i.category == IngredientCategory.ENRICHMENT and not is_egg(i.name)
        ]
        self.sugars = [i for i in present if i.category == IngredientCategory.SWEETENER]
        self.liquids = [
            i for i in present
            if i.category == IngredientCategory.LIQUID and not is_egg(i.name)
        ]
        self.dry = [i for i in present if i.category in DRY_CATEGORIES and not is_egg(i.name)]
        self.flours = [i for i in present if i.category == IngredientCategory.FLOUR]
        self.flavorings = [i for i in present if i.category == IngredientCategory.FLAVORING]
        self.mixins = [i for i in present if i.category == IngredientCategory.MIXIN]
        self.all = present
        # everything but the lamination fat goes into the détrempe
        self.detrempe = [i for i in present if i not in self.fats]


def _lamination_start(s: _Subsets, ddt: Optional[float]) -> List[ProcessStep]:
    return [
        make_step(
            ProcessStage.MIXING, "Mix Détrempe",
            f"Mix {name_list(s.detrempe)} on 1st speed to a smooth, lightly developed dough.",
            duration_min=6, temperature=ddt, mixer_speed=1,
        ),
        make_step(
            ProcessStage.REST, "Chill Détrempe",
            "Flatten into a rectangle, wrap and chill until firm.",
            duration_min=60, temperature=CHILL_TEMP_C,
        ),
        make_step(
            ProcessStage.SHAPE, "Butter Block",
            f"Pound and roll {name_list(s.fats)} into a pliable square block.",
            duration_min=10,
        ),
        make_step(
            ProcessStage.SHAPE, "Lock In Butter",
            "Enclose the butter block in the détrempe and seal the edges.",
            duration_min=5,
        ),
    ]


def laminated_yeasted_steps(ingredients: Sequence[Ingredient], ddt: Optional[float]) -> List[ProcessStep]:
    """Croissant / danish method: three letter folds, then proof and bake."""
    s = _Subsets(ingredients)
    steps = _lamination_start(s, ddt)
    for n in range(1, 4):
        steps.append(make_step(
            ProcessStage.FOLD, f"Letter Fold {n}",
            "Roll out to three times the length and fold in thirds like a letter.",
            duration_min=5,
        ))
        steps.append(make_step(
            ProcessStage.REST, f"Chill {n}",
            "Wrap and chill so the butter firms up before the next fold.",
            duration_min=30, temperature=CHILL_TEMP_C,
        ))
    steps += [
        make_step(
            ProcessStage.SHAPE, "Sheet & Shape",
            "Sheet to final thickness, cut and shape.",
            duration_min=20,
        ),
        make_step(
            ProcessStage.PROOF, "Proof",
            "Proof until jiggly and nearly doubled; keep below butter melting point.",
            duration_min=90, temperature=27,
        ),
        make_step(
            ProcessStage.BAKE, "Bake",
            "Egg wash and bake until deep golden.",
            duration_min=18, temperature=190,
        ),
        make_step(ProcessStage.COOL, "Cool", "Cool on a rack before serving.", duration_min=30),
    ]
    return steps


def laminated_steps(ingredients: Sequence[Ingredient], ddt: Optional[float]) -> List[ProcessStep]:
    """Puff pastry method: six single folds in pairs, no proof."""
    s = _Subsets(ingredients)
    steps = _lamination_start(s, ddt)
    for pair in range(3):
        for n in (pair * 2 + 1, pair * 2 + 2):
            steps.append(make_step(
                ProcessStage.FOLD, f"Single Fold {n}",
                "Roll out to three times the length and fold in thirds.",
                duration_min=5,
            ))
        steps.append(make_step(
            ProcessStage.REST, f"Chill {pair + 1}",
            "Wrap and chill before the next pair of folds.",
            duration_min=30, temperature=CHILL_TEMP_C,
        ))
    steps += [
        make_step(
            ProcessStage.SHAPE, "Sheet & Cut",
            "Sheet to final thickness and cut to shape. Rest chilled before baking.",
            duration_min=15,
        ),
        make_step(
            ProcessStage.BAKE, "Bake",
            "Bake until fully risen and crisp throughout.",
            duration_min=25, temperature=200,
        ),
        make_step(ProcessStage.COOL, "Cool", "Cool on a rack.", duration_min=30),
    ]
    return steps


def choux_steps(ingredients: Sequence[Ingredient], ddt: Optional[float]) -> List[ProcessStep]:
    """Pâte à choux: cooked panade, eggs, pipe, two-stage bake."""
    s = _Subsets(ingredients)
    panade = s.liquids + s.fats + s.sugars + [i for i in s.dry if i.category != IngredientCategory.FLOUR]
    return [
        make_step(
            ProcessStage.MIXING, "Cook Panade",
            f"Bring {name_list(panade)} to a boil, add {name_list(s.flours)} all at once "
            "and cook, stirring, until the paste pulls away from the pan.",
            duration_min=5,
        ),
        make_step(
            ProcessStage.MIXING, "Add Eggs",
            f"Cool slightly, then beat in {name_list(s.eggs)} gradually until the paste "
            "is glossy and falls in a V from the paddle.",
            duration_min=5, mixer_speed=1,
        ),
        make_step(
            ProcessStage.SHAPE, "Pipe",
            "Pipe onto lined trays.",
            duration_min=15,
        ),
        make_step(
            ProcessStage.BAKE, "Bake",
            "Bake without opening the oven until puffed.",
            duration_min=15, temperature=200,
        ),
        make_step(
            ProcessStage.BAKE, "Dry Out",
            "Lower the oven and bake until dry and hollow.",
            duration_min=20, temperature=175,
        ),
        make_step(ProcessStage.COOL, "Cool", "Cool completely on a rack.", duration_min=30),
        make_step(ProcessStage.FINISH, "Fill", "Fill and finish just before serving.", duration_min=15),
    ]


def cookie_steps(ingredients: Sequence[Ingredient], ddt: Optional[float]) -> List[ProcessStep]:
    """Creaming method cookies."""
    s = _Subsets(ingredients)
    steps = [
        make_step(
            ProcessStage.MIXING, "Cream Butter & Sugar",
            f"Cream {name_list(s.fats + s.sugars)} until light and fluffy.",
            duration_min=4, temperature=ddt, mixer_speed=2,
        ),
    ]
    if s.eggs or s.liquids or s.flavorings:
        steps.append(make_step(
            ProcessStage.MIXING, "Add Eggs",
            f"Beat in {name_list(s.eggs + s.liquids + s.flavorings)} until combined.",
            duration_min=2, mixer_speed=1,
        ))
    steps.append(make_step(
        ProcessStage.MIXING, "Add Dry Ingredients",
        f"Mix in {name_list(s.dry)} on low speed until just combined.",
        duration_min=2, mixer_speed=1,
    ))
    if s.mixins:
        steps.append(make_step(
            ProcessStage.MIXING, "Fold in Mix-ins",
            f"Fold in {name_list(s.mixins)}.",
            duration_min=1, mixer_speed=1,
        ))
    steps += [
        make_step(ProcessStage.SHAPE, "Portion", "Scoop and portion onto lined trays.", duration_min=15),
        make_step(ProcessStage.BAKE, "Bake", "Bake until edges are set.", duration_min=12, temperature=175),
        make_step(ProcessStage.COOL, "Cool", "Cool on the tray, then on a rack.", duration_min=20),
    ]
    return steps


def shortcrust_steps(ingredients: Sequence[Ingredient], ddt: Optional[float]) -> List[ProcessStep]:
    """Rubbed-in pastry with a blind bake."""
    s = _Subsets(ingredients)
    return [
        make_step(
            ProcessStage.MIXING, "Sablage",
            f"Rub {name_list(s.fats)} into {name_list(s.dry + s.sugars)} until sandy.",
            duration_min=5, temperature=ddt, mixer_speed=1,
        ),
        make_step(
            ProcessStage.MIXING, "Fraisage",
            f"Add {name_list(s.liquids + s.eggs)} and smear the dough with the heel "
            "of the hand to bring it together.",
            duration_min=3,
        ),
        make_step(
            ProcessStage.REST, "Chill",
            "Flatten, wrap and chill to relax the gluten.",
            duration_min=60, temperature=CHILL_TEMP_C,
        ),
        make_step(ProcessStage.SHAPE, "Roll & Line", "Roll out and line the tins.", duration_min=15),
        make_step(
            ProcessStage.BAKE, "Blind Bake",
            "Line with paper and weights and bake until set.",
            duration_min=20, temperature=180,
        ),
        make_step(ProcessStage.COOL, "Cool", "Cool in the tins.", duration_min=20),
    ]


def sweet_pastry_steps(ingredients: Sequence[Ingredient], ddt: Optional[float]) -> List[ProcessStep]:
    """Pâte sucrée by the creaming method."""
    s = _Subsets(ingredients)
    steps = [
        make_step(
            ProcessStage.MIXING, "Cream Butter & Sugar",
            f"Cream {name_list(s.fats + s.sugars)} until smooth, without aerating.",
            duration_min=3, temperature=ddt, mixer_speed=1,
        ),
    ]
    if s.eggs or s.liquids:
        steps.append(make_step(
            ProcessStage.MIXING, "Add Egg",
            f"Mix in {name_list(s.eggs + s.liquids)}.",
            duration_min=2, mixer_speed=1,
        ))
    steps += [
        make_step(
            ProcessStage.MIXING, "Add Flour",
            f"Add {name_list(s.dry)} and mix until just combined.",
            duration_min=2, mixer_speed=1,
        ),
        make_step(
            ProcessStage.REST, "Chill",
            "Flatten, wrap and chill until firm.",
            duration_min=60, temperature=CHILL_TEMP_C,
        ),
        make_step(ProcessStage.SHAPE, "Roll & Line", "Roll out and line the tins.", duration_min=15),
        make_step(ProcessStage.BAKE, "Bake", "Bake until evenly golden.", duration_min=18, temperature=170),
        make_step(ProcessStage.COOL, "Cool", "Cool in the tins.", duration_min=20),
    ]
    return steps


def pasta_steps(ingredients: Sequence[Ingredient], ddt: Optional[float]) -> List[ProcessStep]:
    """Fresh pasta: mix, knead, rest, roll, cut, then dry or cook."""
    s = _Subsets(ingredients)
    return [
        make_step(
            ProcessStage.MIXING, "Mix",
            f"Combine {name_list(s.all)} into a shaggy dough.",
            duration_min=5, mixer_speed=1,
        ),
        make_step(
            ProcessStage.MIXING, "Knead",
            "Knead until smooth and elastic.",
            duration_min=10,
        ),
        make_step(ProcessStage.REST, "Rest", "Wrap and rest to relax the gluten.", duration_min=30),
        make_step(ProcessStage.SHAPE, "Roll", "Sheet through progressively thinner settings.", duration_min=15),
        make_step(ProcessStage.SHAPE, "Cut", "Cut into the desired shape.", duration_min=10),
        make_step(ProcessStage.FINISH, "Dry or Cook", "Dry on racks for storage, or cook in salted water.", duration_min=10),
    ]


def topping_steps(ingredients: Sequence[Ingredient], ddt: Optional[float]) -> List[ProcessStep]:
    s = _Subsets(ingredients)
    return [
        make_step(
            ProcessStage.MIXING, "Combine",
            f"Combine {name_list(s.all)} until evenly mixed.",
            duration_min=5, mixer_speed=1,
        ),
        make_step(ProcessStage.REST, "Chill", "Chill until needed.", duration_min=15, temperature=CHILL_TEMP_C),
    ]


def glaze_steps(ingredients: Sequence[Ingredient], ddt: Optional[float]) -> List[ProcessStep]:
    s = _Subsets(ingredients)
    return [
        make_step(
            ProcessStage.MIXING, "Whisk Glaze",
            f"Whisk {name_list(s.all)} until smooth.",
            duration_min=5,
        ),
        make_step(ProcessStage.REST, "Rest", "Rest until it reaches coating consistency.", duration_min=10),
    ]


def filling_steps(ingredients: Sequence[Ingredient], ddt: Optional[float]) -> List[ProcessStep]:
    s = _Subsets(ingredients)
    return [
        make_step(
            ProcessStage.MIXING, "Prepare Filling",
            f"Combine {name_list(s.all)}; cook where required until thickened.",
            duration_min=15,
        ),
        make_step(ProcessStage.COOL, "Cool", "Cool completely before use.", duration_min=60),
    ]


def sauce_steps(ingredients: Sequence[Ingredient], ddt: Optional[float]) -> List[ProcessStep]:
    s = _Subsets(ingredients)
    return [
        make_step(
            ProcessStage.MIXING, "Cook Sauce",
            f"Combine {name_list(s.all)} and simmer to the desired consistency.",
            duration_min=20,
        ),
        make_step(ProcessStage.COOL, "Cool", "Cool and hold until needed.", duration_min=30),
    ]


TemplateFn = Callable[[Sequence[Ingredient], Optional[float]], List[ProcessStep]]

SPECIALIZED_TEMPLATES: Dict[str, TemplateFn] = {
    DoughType.LAMINATED_YEASTED.value: laminated_yeasted_steps,
    DoughType.LAMINATED.value: laminated_steps,
    DoughType.CHOUX.value: choux_steps,
    DoughType.COOKIE.value: cookie_steps,
    DoughType.SHORTCRUST.value: shortcrust_steps,
    DoughType.SWEET_PASTRY.value: sweet_pastry_steps,
    DoughType.PASTA.value: pasta_steps,
    ComponentType.TOPPING.value: topping_steps,
    ComponentType.GLAZE.value: glaze_steps,
    ComponentType.FILLING.value: filling_steps,
    ComponentType.SAUCE.value: sauce_steps,
}


def get_template(kind) -> Optional[TemplateFn]:
    """Template for a dough type or component kind, or None for the bread generator."""
    if kind is None:
        return None
    key = getattr(kind, "value", kind)
    if not isinstance(key, str):
        return None
    return SPECIALIZED_TEMPLATES.get(key.strip().upper())
