"""
Classifier ensembles recorded during an experiment.

Each run of an algorithm can record the classifiers it built, as
predictions per instance id. The runner collects them per fold into a
ClassifierEnsembleList and writes the list to XML next to the fold data.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional


@dataclass
class ClassifierRecord:
    """Predictions of one trained classifier.

    Attributes:
        name: Classifier name (e.g. "naive_bayes").
        fold: Fold the classifier was trained in.
        split: Split the classifier was trained in.
        view: View index, None when trained on all features.
        predictions: Predicted label per instance id.
    """

    name: str
    fold: int
    split: int
    view: Optional[int] = None
    predictions: Dict[str, str] = field(default_factory=dict)


@dataclass
class ClassifierEnsemble:
    """Classifiers produced by one algorithm run."""

    classifiers: List[ClassifierRecord] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.classifiers)


class ClassifierEnsembleList:
    """Ordered collection of ensembles for one fold."""

    def __init__(self) -> None:
        self._ensembles: List[ClassifierEnsemble] = []

    @property
    def ensembles(self) -> List[ClassifierEnsemble]:
        return self._ensembles

    def add_classifiers(self, ensembles: Iterable[ClassifierEnsemble] | None) -> None:
        """Append ensembles; None and empty ensembles are ignored."""
        if ensembles is None:
            return
        self._ensembles.extend(e for e in ensembles if len(e) > 0)

    def __len__(self) -> int:
        return len(self._ensembles)

    def to_element(self) -> ET.Element:
        root = ET.Element("ensembles")
        for i, ensemble in enumerate(self._ensembles):
            ens_el = ET.SubElement(root, "ensemble", index=str(i))
            for rec in ensemble.classifiers:
                attrs = {"name": rec.name, "fold": str(rec.fold), "split": str(rec.split)}
                if rec.view is not None:
                    attrs["view"] = str(rec.view)
                cls_el = ET.SubElement(ens_el, "classifier", attrs)
                for inst_id, label in rec.predictions.items():
                    ET.SubElement(cls_el, "prediction", id=str(inst_id), label=str(label))
        return root

    def to_xml(self, path: Path | str) -> None:
        """Write the list to ``path``, overwriting any existing file."""
        tree = ET.ElementTree(self.to_element())
        ET.indent(tree)
        with open(path, "wb") as f:
            tree.write(f, encoding="utf-8", xml_declaration=True)

    @classmethod
    def from_xml(cls, path: Path | str) -> ClassifierEnsembleList:
        """Read a list written by to_xml()."""
        root = ET.parse(path).getroot()
        result = cls()
        for ens_el in root.findall("ensemble"):
            ensemble = ClassifierEnsemble()
            for cls_el in ens_el.findall("classifier"):
                view = cls_el.get("view")
                ensemble.classifiers.append(ClassifierRecord(
                    name=cls_el.get("name", ""),
                    fold=int(cls_el.get("fold", "0")),
                    split=int(cls_el.get("split", "0")),
                    view=int(view) if view is not None else None,
                    predictions={
                        p.get("id"): p.get("label") for p in cls_el.findall("prediction")
                    },
                ))
            result._ensembles.append(ensemble)
        return result
