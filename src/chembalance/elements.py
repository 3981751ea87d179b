"""Element reference table.

The table is read-only once constructed and can be shared between
concurrent balancing calls. Callers construct it explicitly (usually via
``PeriodicTable.standard()``) and pass it to the code that needs atomic
masses.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, Mapping

from chembalance.errors import UnknownElementError


class ElementTable(ABC):
    """Abstract lookup of atomic masses by element symbol."""

    @abstractmethod
    def atomic_mass(self, symbol: str) -> float | None:
        """Return the standard atomic mass (g/mol), or ``None`` if unknown."""
        pass

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and self.atomic_mass(symbol) is not None


@dataclass(frozen=True)
class ElementData:
    symbol: str
    name: str
    atomic_mass: float  # g/mol
    atomic_number: int
    category: str


# symbol, name, atomic mass, atomic number, category
_STANDARD_ELEMENTS = (
    ("H", "Hydrogen", 1.008, 1, "Nonmetal"),
    ("He", "Helium", 4.003, 2, "Noble gas"),
    ("Li", "Lithium", 6.941, 3, "Alkali metal"),
    ("Be", "Beryllium", 9.012, 4, "Alkaline earth metal"),
    ("B", "Boron", 10.811, 5, "Metalloid"),
    ("C", "Carbon", 12.011, 6, "Nonmetal"),
    ("N", "Nitrogen", 14.007, 7, "Nonmetal"),
    ("O", "Oxygen", 15.999, 8, "Nonmetal"),
    ("F", "Fluorine", 18.998, 9, "Halogen"),
    ("Ne", "Neon", 20.180, 10, "Noble gas"),
    ("Na", "Sodium", 22.990, 11, "Alkali metal"),
    ("Mg", "Magnesium", 24.305, 12, "Alkaline earth metal"),
    ("Al", "Aluminum", 26.982, 13, "Metal"),
    ("Si", "Silicon", 28.086, 14, "Metalloid"),
    ("P", "Phosphorus", 30.974, 15, "Nonmetal"),
    ("S", "Sulfur", 32.066, 16, "Nonmetal"),
    ("Cl", "Chlorine", 35.453, 17, "Halogen"),
    ("Ar", "Argon", 39.948, 18, "Noble gas"),
    ("K", "Potassium", 39.098, 19, "Alkali metal"),
    ("Ca", "Calcium", 40.078, 20, "Alkaline earth metal"),
    ("Sc", "Scandium", 44.956, 21, "Transition metal"),
    ("Ti", "Titanium", 47.867, 22, "Transition metal"),
    ("V", "Vanadium", 50.942, 23, "Transition metal"),
    ("Cr", "Chromium", 51.996, 24, "Transition metal"),
    ("Mn", "Manganese", 54.938, 25, "Transition metal"),
    ("Fe", "Iron", 55.845, 26, "Transition metal"),
    ("Co", "Cobalt", 58.933, 27, "Transition metal"),
    ("Ni", "Nickel", 58.693, 28, "Transition metal"),
    ("Cu", "Copper", 63.546, 29, "Transition metal"),
    ("Zn", "Zinc", 65.38, 30, "Transition metal"),
    ("Ga", "Gallium", 69.723, 31, "Metal"),
    ("Ge", "Germanium", 72.630, 32, "Metalloid"),
    ("As", "Arsenic", 74.922, 33, "Metalloid"),
    ("Se", "Selenium", 78.971, 34, "Nonmetal"),
    ("Br", "Bromine", 79.904, 35, "Halogen"),
    ("Kr", "Krypton", 83.798, 36, "Noble gas"),
    ("Rb", "Rubidium", 85.468, 37, "Alkali metal"),
    ("Sr", "Strontium", 87.62, 38, "Alkaline earth metal"),
    ("Y", "Yttrium", 88.906, 39, "Transition metal"),
    ("Zr", "Zirconium", 91.224, 40, "Transition metal"),
    ("Nb", "Niobium", 92.906, 41, "Transition metal"),
    ("Mo", "Molybdenum", 95.95, 42, "Transition metal"),
    ("Tc", "Technetium", 98.0, 43, "Transition metal"),
    ("Ru", "Ruthenium", 101.07, 44, "Transition metal"),
    ("Rh", "Rhodium", 102.91, 45, "Transition metal"),
    ("Pd", "Palladium", 106.42, 46, "Transition metal"),
    ("Ag", "Silver", 107.87, 47, "Transition metal"),
    ("Cd", "Cadmium", 112.41, 48, "Transition metal"),
    ("In", "Indium", 114.82, 49, "Metal"),
    ("Sn", "Tin", 118.71, 50, "Metal"),
    ("Sb", "Antimony", 121.76, 51, "Metalloid"),
    ("Te", "Tellurium", 127.60, 52, "Metalloid"),
    ("I", "Iodine", 126.90, 53, "Halogen"),
    ("Xe", "Xenon", 131.29, 54, "Noble gas"),
    ("Cs", "Cesium", 132.91, 55, "Alkali metal"),
    ("Ba", "Barium", 137.33, 56, "Alkaline earth metal"),
    ("La", "Lanthanum", 138.91, 57, "Lanthanide"),
    ("Ce", "Cerium", 140.12, 58, "Lanthanide"),
    ("Pr", "Praseodymium", 140.91, 59, "Lanthanide"),
    ("Nd", "Neodymium", 144.24, 60, "Lanthanide"),
    ("Pm", "Promethium", 145.0, 61, "Lanthanide"),
    ("Sm", "Samarium", 150.36, 62, "Lanthanide"),
    ("Eu", "Europium", 151.96, 63, "Lanthanide"),
    ("Gd", "Gadolinium", 157.25, 64, "Lanthanide"),
    ("Tb", "Terbium", 158.93, 65, "Lanthanide"),
    ("Dy", "Dysprosium", 162.50, 66, "Lanthanide"),
    ("Ho", "Holmium", 164.93, 67, "Lanthanide"),
    ("Er", "Erbium", 167.26, 68, "Lanthanide"),
    ("Tm", "Thulium", 168.93, 69, "Lanthanide"),
    ("Yb", "Ytterbium", 173.04, 70, "Lanthanide"),
    ("Lu", "Lutetium", 174.97, 71, "Lanthanide"),
    ("Hf", "Hafnium", 178.49, 72, "Transition metal"),
    ("Ta", "Tantalum", 180.95, 73, "Transition metal"),
    ("W", "Tungsten", 183.84, 74, "Transition metal"),
    ("Re", "Rhenium", 186.21, 75, "Transition metal"),
    ("Os", "Osmium", 190.23, 76, "Transition metal"),
    ("Ir", "Iridium", 192.22, 77, "Transition metal"),
    ("Pt", "Platinum", 195.08, 78, "Transition metal"),
    ("Au", "Gold", 196.97, 79, "Transition metal"),
    ("Hg", "Mercury", 200.59, 80, "Transition metal"),
    ("Tl", "Thallium", 204.38, 81, "Metal"),
    ("Pb", "Lead", 207.2, 82, "Metal"),
    ("Bi", "Bismuth", 208.98, 83, "Metal"),
    ("Po", "Polonium", 209.0, 84, "Metalloid"),
    ("At", "Astatine", 210.0, 85, "Halogen"),
    ("Rn", "Radon", 222.0, 86, "Noble gas"),
    ("Fr", "Francium", 223.0, 87, "Alkali metal"),
    ("Ra", "Radium", 226.0, 88, "Alkaline earth metal"),
    ("Ac", "Actinium", 227.0, 89, "Actinide"),
    ("Th", "Thorium", 232.04, 90, "Actinide"),
    ("Pa", "Protactinium", 231.04, 91, "Actinide"),
    ("U", "Uranium", 238.03, 92, "Actinide"),
)


class PeriodicTable(ElementTable):
    """Element table backed by an immutable symbol -> ``ElementData`` map."""

    def __init__(self, elements: Iterable[ElementData]):
        self._elements: Mapping[str, ElementData] = MappingProxyType(
            {element.symbol: element for element in elements}
        )

    @classmethod
    def standard(cls) -> "PeriodicTable":
        """Return the shared table of naturally occurring elements H..U."""
        return _standard_table()

    def atomic_mass(self, symbol: str) -> float | None:
        element = self._elements.get(symbol)
        return element.atomic_mass if element else None

    def element(self, symbol: str) -> ElementData:
        try:
            return self._elements[symbol]
        except KeyError:
            raise UnknownElementError(symbol) from None

    def symbols(self) -> list[str]:
        return sorted(self._elements)

    def __len__(self) -> int:
        return len(self._elements)


@lru_cache(maxsize=None)
def _standard_table() -> PeriodicTable:
    return PeriodicTable(
        ElementData(symbol, name, mass, number, category)
        for symbol, name, mass, number, category in _STANDARD_ELEMENTS
    )
