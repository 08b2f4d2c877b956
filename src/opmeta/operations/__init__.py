"""Analysis of GraphQL operation documents into parameter descriptors."""

from .analyzer import analyze_documents, analyze_operation
from .models import OperationDescriptor, ParameterDescriptor

__all__ = ["OperationDescriptor", "ParameterDescriptor", "analyze_documents", "analyze_operation"]
