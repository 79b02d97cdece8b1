from dataclasses import dataclass, asdict


@dataclass
class Monster:
    id: str
    name: str
    image: str
    level: int
    vitality: int
    strength: int
    agility: int
    energy: int
    intellect: int
    spirit: int
    attack: int
    defense: int
    magic_defense: int
    attack_extra: int
    experience_reward: int
    currency_reward: int

    def to_dict(self): return asdict(self)

    @classmethod
    def from_dict(cls, data):
        return cls(**{k: data[k] for k in cls.__dataclass_fields__})
