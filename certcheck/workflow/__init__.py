from certcheck.workflow.controller import WorkflowController, build_controller
from certcheck.workflow.models import Session, Stage
from certcheck.workflow.upload_gate import UploadGate

__all__ = ["Session", "Stage", "UploadGate", "WorkflowController", "build_controller"]
