import pytest
from kubernetes.client import V1Container

from cwl2argo.argo.binding import FlatOutputBinding
from cwl2argo.argo.manifest import serialize
from cwl2argo.argo.storage import (
    attach_volume,
    emit_pvc,
    expression_to_quantity,
    need_pvc,
)
from cwl2argo.core.exception import UnsupportedFeatureException, ValidationException
from cwl2argo.cwl.loader import load_expression
from cwl2argo.cwl.model import CWLExpression, ExpressionKind, TypeKind
from tests.utils.cwl import get_requirement, get_resource_requirement


@pytest.mark.parametrize(
    "value,quantity",
    [(2.3, "3Mi"), (2.0, "2Mi"), (2, "2Mi"), (1024, "1024Mi"), ("4Gi", "4Gi")],
)
def test_expression_to_quantity(value, quantity):
    """Check that numbers are read as mebibytes and raw text passes through."""
    assert expression_to_quantity(load_expression(value)) == quantity


@pytest.mark.parametrize("value", ["4Gx", "lots"])
def test_expression_to_quantity_invalid(value):
    """Check that malformed quantities are rejected."""
    with pytest.raises(ValidationException):
        expression_to_quantity(load_expression(value))


def test_expression_to_quantity_unsupported():
    """Check that expressions cannot be converted into quantities yet."""
    with pytest.raises(UnsupportedFeatureException):
        expression_to_quantity(load_expression("$(inputs.size)"))
    with pytest.raises(ValidationException):
        expression_to_quantity(CWLExpression(ExpressionKind.BOOL, True))


def test_need_pvc():
    """Check that storage is needed only when a File output exists."""
    assert not need_pvc([])
    assert not need_pvc([FlatOutputBinding("n", TypeKind.INT)])
    assert need_pvc(
        [FlatOutputBinding("n", TypeKind.INT), FlatOutputBinding("f", TypeKind.FILE)]
    )


def test_emit_pvc():
    """Check the shape of the persistent volume claim."""
    pvc = emit_pvc(
        get_requirement(get_resource_requirement(outdirMin=2.3)), "argovolume"
    )
    assert serialize(pvc) == {
        "metadata": {"name": "argovolume"},
        "spec": {
            "accessModes": ["ReadWriteMany"],
            "resources": {"requests": {"storage": "3Mi"}},
        },
    }


def test_emit_pvc_outdir_max():
    """Check that outdirMax is used when outdirMin is not declared."""
    pvc = emit_pvc(get_requirement(get_resource_requirement(outdirMax="1Gi")), "vol")
    assert pvc.spec.resources.requests == {"storage": "1Gi"}


def test_emit_pvc_without_outdir():
    """Check that a volume cannot be sized without an output directory size."""
    with pytest.raises(ValidationException):
        emit_pvc(get_requirement(get_resource_requirement(coresMin=1)), "vol")


def test_attach_volume_default_mount_path():
    """Check that the volume uses the default path without a working directory."""
    container = V1Container(name="main", image="alpine")
    mounted = attach_volume(container, "argovolume", "/mnt/pvol")
    assert [(m.name, m.mount_path) for m in mounted.volume_mounts] == [
        ("argovolume", "/mnt/pvol")
    ]
    assert container.volume_mounts is None


def test_attach_volume_working_dir():
    """Check that the volume is mounted at the container working directory."""
    container = V1Container(name="main", image="alpine", working_dir="/work")
    mounted = attach_volume(container, "argovolume", "/mnt/pvol")
    assert mounted.volume_mounts[0].mount_path == "/work"
