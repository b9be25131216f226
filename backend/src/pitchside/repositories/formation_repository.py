"""Formation template repository backed by a JSON knowledge file."""
import json
import logging
import uuid
from pathlib import Path
from typing import Optional

from pitchside.models.formation import Formation, Position, Slot
from pitchside.utils.roles import is_valid_role

logger = logging.getLogger(__name__)


class FormationRepository:
    """Loads named formation layouts (4-4-2, 4-3-3, ...)."""

    def __init__(self, knowledge_dir: Optional[Path] = None):
        if knowledge_dir is None:
            knowledge_dir = Path(__file__).parents[4] / "knowledge"
        self.knowledge_dir = Path(knowledge_dir)
        self._templates: dict[str, dict] = {}
        self._load_data()

    def _load_data(self):
        """Load formation templates."""
        path = self.knowledge_dir / "formations.json"
        if not path.exists():
            logger.warning(f"formations.json not found at {path}")
            return

        with open(path) as f:
            data = json.load(f)

        for template in data.get("formations", []):
            bad_roles = [s["role"] for s in template.get("slots", []) if not is_valid_role(s["role"])]
            if bad_roles:
                logger.warning(f"Skipping template {template.get('id')}: unknown roles {bad_roles}")
                continue
            self._templates[template["id"]] = template
        logger.info(f"Loaded {len(self._templates)} formation templates from {path}")

    def list_templates(self) -> list[dict]:
        """Summaries of all templates, in file order."""
        return [
            {
                "id": t["id"],
                "name": t.get("name", t["id"]),
                "description": t.get("description", ""),
                "slot_count": len(t.get("slots", [])),
            }
            for t in self._templates.values()
        ]

    def has_template(self, template_id: str) -> bool:
        return template_id in self._templates

    def get_template(self, template_id: str, formation_id: Optional[str] = None) -> Optional[Formation]:
        """Build a fresh, unbound Formation from a template."""
        template = self._templates.get(template_id)
        if template is None:
            return None
        return Formation(
            id=formation_id or f"{template_id}_{uuid.uuid4().hex[:8]}",
            name=template.get("name", template_id),
            slots=tuple(
                Slot(
                    id=s["id"],
                    role=s["role"],
                    position=Position(x=float(s["x"]), y=float(s["y"])),
                    preferred_roles=tuple(s.get("preferred_roles", [])),
                )
                for s in template.get("slots", [])
            ),
        )
