"""
Results document (Results.xml).

The document groups experiments by the configuration properties they were
run with. Inside a group, experiments are identified by name and hold one
record per measure. Lookups create missing entries, so running the same
experiment again overwrites its measures instead of adding duplicates.

Layout:

    <results>
      <experiments>
        <properties>
          <property name="no_folds" value="10"/>
        </properties>
        <experiment name="L_Random">
          <measure name="accuracy" microAveraged="81.2"
                   macroAveraged="81.0" stdDev="2.3"/>
        </experiment>
      </experiments>
    </results>
"""

from __future__ import annotations

import logging
import os
import tempfile
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from rssalg.evaluation.statistics import format_value
from rssalg.exceptions import ResultsStoreError

logger = logging.getLogger(__name__)

RESULTS_FILE = "Results.xml"


def _parse_float(value: Optional[str]) -> Optional[float]:
    return float(value) if value not in (None, "") else None


@dataclass
class MeasureRecord:
    """Stored statistics of one measure."""

    name: str
    micro_averaged: Optional[float] = None
    macro_averaged: Optional[float] = None
    std_dev: Optional[float] = None

    def set_micro_averaged(self, value: float) -> None:
        self.micro_averaged = value

    def set_macro_averaged(self, value: float) -> None:
        self.macro_averaged = value

    def set_std_dev(self, value: Optional[float]) -> None:
        self.std_dev = value


@dataclass
class ExperimentRecord:
    """Named experiment with its measure records."""

    name: str
    measures: List[MeasureRecord] = field(default_factory=list)

    def find_measure(self, name: str) -> MeasureRecord:
        """Return the measure record called ``name``, creating it if needed."""
        for m in self.measures:
            if m.name == name:
                return m
        m = MeasureRecord(name)
        self.measures.append(m)
        return m


@dataclass
class Experiments:
    """Experiments sharing one set of configuration properties."""

    properties: Dict[str, str]
    experiments: List[ExperimentRecord] = field(default_factory=list)

    def find_experiment(self, name: str) -> ExperimentRecord:
        """Return the experiment called ``name``, creating it if needed."""
        for e in self.experiments:
            if e.name == name:
                return e
        e = ExperimentRecord(name)
        self.experiments.append(e)
        return e


class ExperimentResults:
    """In-memory results document."""

    def __init__(self) -> None:
        self.groups: List[Experiments] = []

    def find_experiments_by_properties(self, properties: Dict[str, str]) -> Experiments:
        """Return the group with exactly these properties, creating it if needed."""
        props = {str(k): str(v) for k, v in properties.items()}
        for group in self.groups:
            if group.properties == props:
                return group
        group = Experiments(props)
        self.groups.append(group)
        return group

    @classmethod
    def from_xml(cls, path: Path | str) -> ExperimentResults:
        """Read a results document.

        A missing file gives an empty document.

        Raises:
            ResultsStoreError: If the file exists but cannot be read or parsed.
        """
        path = Path(path)
        results = cls()
        if not path.exists():
            logger.info(f"No results document at {path}; starting a new one")
            return results

        try:
            root = ET.parse(path).getroot()
            for group_el in root.findall("experiments"):
                props_el = group_el.find("properties")
                props = {}
                if props_el is not None:
                    for p in props_el.findall("property"):
                        if not p.get("name"):
                            logger.warning(f"Skipping unnamed property in {path}")
                            continue
                        props[p.get("name")] = p.get("value", "")
                group = Experiments(props)
                for exp_el in group_el.findall("experiment"):
                    exp = ExperimentRecord(exp_el.get("name", ""))
                    for m_el in exp_el.findall("measure"):
                        exp.measures.append(MeasureRecord(
                            name=m_el.get("name", ""),
                            micro_averaged=_parse_float(m_el.get("microAveraged")),
                            macro_averaged=_parse_float(m_el.get("macroAveraged")),
                            std_dev=_parse_float(m_el.get("stdDev")),
                        ))
                    group.experiments.append(exp)
                results.groups.append(group)
        except (OSError, ET.ParseError, ValueError) as err:
            raise ResultsStoreError(f"Cannot read results document {path}") from err

        return results

    def to_element(self) -> ET.Element:
        root = ET.Element("results")
        for group in self.groups:
            group_el = ET.SubElement(root, "experiments")
            props_el = ET.SubElement(group_el, "properties")
            for name, value in group.properties.items():
                ET.SubElement(props_el, "property", name=name, value=value)
            for exp in group.experiments:
                exp_el = ET.SubElement(group_el, "experiment", name=exp.name)
                for m in exp.measures:
                    attrs = {"name": m.name}
                    for attr, value in [("microAveraged", m.micro_averaged),
                                        ("macroAveraged", m.macro_averaged),
                                        ("stdDev", m.std_dev)]:
                        if value is not None:
                            attrs[attr] = repr(float(value))
                    ET.SubElement(exp_el, "measure", attrs)
        return root

    def to_xml(self, path: Path | str) -> None:
        """Write the whole document to ``path``.

        The document is written to a temporary file in the same folder and
        then moved over ``path``, so a failed write leaves the previous
        document in place.

        Raises:
            ResultsStoreError: If the document cannot be serialized or written.
        """
        path = Path(path)
        tmp_name = None
        try:
            tree = ET.ElementTree(self.to_element())
            ET.indent(tree)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
            )
            with os.fdopen(fd, "wb") as f:
                tree.write(f, encoding="utf-8", xml_declaration=True)
            os.replace(tmp_name, path)
            tmp_name = None
        except (OSError, TypeError, ValueError) as err:
            raise ResultsStoreError(f"Cannot write results document {path}") from err
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.remove(tmp_name)

    def __str__(self) -> str:
        lines = []
        for group in self.groups:
            props = ", ".join(f"{k}={v}" for k, v in group.properties.items())
            lines.append(f"[{props}]")
            for exp in group.experiments:
                lines.append(f"  {exp.name}")
                for m in exp.measures:
                    lines.append(
                        f"    {m.name}: micro {format_value(m.micro_averaged)}, "
                        f"macro {format_value(m.macro_averaged)} +/- {format_value(m.std_dev)}"
                    )
        return "\n".join(lines)
