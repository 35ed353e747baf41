"""Order model: the parts of one production order."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from .part import PartDescriptor

logger = logging.getLogger(__name__)


@dataclass
class Order:
    """
    Parts requested by one production order.
    This is the input to the planning service.

    Rows are kept as raw records so that invalid parts can be reported per
    part by the planner instead of failing the whole load.

    Attributes:
        id: Order identifier
        records: Part records (upstream dict shape), expanded by quantity
    """
    id: str
    records: List[Dict[str, Any]] = field(default_factory=list)

    def num_parts(self) -> int:
        """Get total number of part records."""
        return len(self.records)

    def get_unique_materials(self) -> List[str]:
        """Get list of unique materials, in first-seen order."""
        materials: List[str] = []
        for record in self.records:
            material = record.get("material") or ""
            if material not in materials:
                materials.append(material)
        return materials

    def to_parts(self) -> List[PartDescriptor]:
        """
        Convert every record to a PartDescriptor.

        Raises:
            ValidationError: on the first invalid record
        """
        return [PartDescriptor.from_dict(record, order_id=self.id) for record in self.records]

    @classmethod
    def load_from_dataframe(cls, df: pd.DataFrame, order_id: str) -> 'Order':
        """
        Create Order from a pandas DataFrame.

        Args:
            df: DataFrame with columns: id, name, partType, width, height,
                depth or thickness, material, color, drilling (JSON text),
                quantity (optional, defaults to 1)
            order_id: Order identifier

        Returns:
            Order instance
        """
        records = []

        for row_pos, (_, row) in enumerate(df.iterrows(), start=1):
            raw_quantity = _cell(row, "quantity")
            quantity = _to_quantity(raw_quantity)

            row_id = _cell(row, "id")
            if row_id is None:
                row_id = f"row_{row_pos:05d}"
            elif isinstance(row_id, float) and row_id.is_integer():
                row_id = str(int(row_id))
            row_id = str(row_id).strip()

            drilling = _cell(row, "drilling")
            if isinstance(drilling, str):
                try:
                    drilling = json.loads(drilling) if drilling.strip() else []
                except json.JSONDecodeError:
                    # Left as text, the planner rejects this row on its own
                    logger.warning("Row %d (%s) has unreadable drilling %r", row_pos, row_id, drilling)

            record = {
                "name": _cell(row, "name"),
                "partType": _cell(row, "partType"),
                "width": _cell(row, "width"),
                "height": _cell(row, "height"),
                "depth": _cell(row, "depth"),
                "thickness": _cell(row, "thickness"),
                "material": _cell(row, "material"),
                "color": _cell(row, "color"),
                "drilling": drilling or []
            }

            if quantity is None:
                logger.warning("Row %d (%s) has invalid quantity %r", row_pos, row_id, raw_quantity)
                records.append({"id": row_id, "quantity": raw_quantity, **record})
                continue

            for i in range(quantity):
                records.append({
                    "id": row_id if quantity == 1 else f"{row_id}_{i + 1:03d}",
                    **record
                })

        return cls(id=order_id, records=records)

    @classmethod
    def load_from_file(cls, path: str, order_id: Optional[str] = None) -> 'Order':
        """
        Load an order from an Excel (.xlsx/.xls) or CSV parts table.

        Args:
            path: Path to the parts table
            order_id: Order identifier, defaults to the file stem

        Returns:
            Order instance
        """
        file_path = Path(path)
        if file_path.suffix.lower() in (".xlsx", ".xls"):
            df = pd.read_excel(file_path, sheet_name=0, engine="openpyxl")
        else:
            df = pd.read_csv(file_path)
        return cls.load_from_dataframe(df, order_id or file_path.stem)

    def __repr__(self) -> str:
        return f"Order(id={self.id}, parts={self.num_parts()}, materials={len(self.get_unique_materials())})"


def _cell(row: pd.Series, column: str) -> Any:
    """Cell value, with missing columns and NaN mapped to None."""
    if column not in row:
        return None
    value = row[column]
    if not isinstance(value, (list, dict)) and pd.isna(value):
        return None
    return value


def _to_quantity(value: Any) -> Optional[int]:
    """Row quantity, 1 when blank, None when not a whole number of at least one."""
    if value is None:
        return 1
    try:
        quantity = float(value)
    except (TypeError, ValueError):
        return None
    if quantity < 1 or not quantity.is_integer():
        return None
    return int(quantity)
