from typing import NamedTuple

from duel_engine.errors import UnknownSpecies


class Species(NamedTuple):
    """Static attributes of a species, as supplied by the roster data."""
    id: int
    name: str
    types: tuple
    king_defense_penalty: int = 0


class Classification(NamedTuple):
    """Balance modifier assigned to a species by the external classifier."""
    species_mod: int = 0
    target: str = "defense"


NEUTRAL_CLASSIFICATION = Classification()


class SpeciesCatalogue:
    """Read-only lookup of species and their classification by id."""

    def __init__(self, species=(), classifications=None):
        self._species = {s.id: s for s in species}
        self._classifications = dict(classifications or {})

    @classmethod
    def from_records(cls, records):
        """
        Build a catalogue from plain dicts such as
        {"id": 1, "name": "Bulbasaur", "types": ["Grass", "Poison"],
         "species_mod": 1, "species_mod_target": "defense"}.
        """
        species, classifications = [], {}
        for rec in records:
            sp = Species(rec["id"], rec["name"], tuple(rec["types"]),
                         rec.get("king_defense_penalty", 0))
            species.append(sp)
            if "species_mod" in rec:
                classifications[sp.id] = Classification(
                    rec["species_mod"], rec.get("species_mod_target", "defense"))
        return cls(species, classifications)

    def __contains__(self, species_id):
        return species_id in self._species

    def __len__(self):
        return len(self._species)

    def get(self, species_id) -> Species:
        try:
            return self._species[species_id]
        except KeyError:
            raise UnknownSpecies(f"Species {species_id} not found in catalogue.",
                                 context={"species_id": species_id}) from None

    def classification(self, species_id) -> Classification:
        """Classifier output for a species; species without one are neutral."""
        self.get(species_id)
        return self._classifications.get(species_id, NEUTRAL_CLASSIFICATION)
