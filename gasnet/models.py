"""
Design (models.py)
- Purpose: Define simple, typed data structures for domain entities (Pipe, Station).
- Inputs: Field values (str, float, int, bool).
- Outputs: Dataclass instances.
- Side effects: Mutators change the instance in place.
- Thread-safety: Plain containers; single caller assumed.
"""

from dataclasses import dataclass


@dataclass
class Pipe:
    """
    Design (Pipe)
    - Purpose: A linear asset in the network.
    - Fields:
        name: Free text, may be empty.
        length_km: Length in kilometers.
        diameter_mm: Diameter in millimeters.
        under_repair: True while the pipe is out for repair.
        id: Assigned by Repo.create(); 0 until stored.
    """
    name: str
    length_km: float
    diameter_mm: int
    under_repair: bool = False
    id: int = 0

    def toggle_repair(self) -> None:
        """Flip the repair flag. Always succeeds."""
        self.under_repair = not self.under_repair

    @property
    def status_label(self) -> str:
        return "under repair" if self.under_repair else "in service"


@dataclass
class Station:
    """
    Design (Station)
    - Purpose: A compressor station with a fixed number of workshops.
    - Fields:
        name: Free text, may be empty.
        total_workshops: Number of workshops built.
        working_workshops: Number currently running (0..total).
        classification: Free text label.
        id: Assigned by Repo.create(); 0 until stored.
    - State machine: (working, total) moves by +1 up to total or -1 down to 0.
    """
    name: str
    total_workshops: int
    working_workshops: int = 0
    classification: str = ""
    id: int = 0

    def start_workshop(self) -> bool:
        if self.working_workshops < self.total_workshops:
            self.working_workshops += 1
            return True
        return False

    def stop_workshop(self) -> bool:
        if self.working_workshops > 0:
            self.working_workshops -= 1
            return True
        return False

    @property
    def unused_percentage(self) -> float:
        """Share of idle workshops, 0..100 (0 when the station has no workshops)."""
        if self.total_workshops == 0:
            return 0.0
        return (self.total_workshops - self.working_workshops) * 100.0 / self.total_workshops
