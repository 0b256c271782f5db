# Salesforce Reports MCP Server
# File: mock.py
# Version: v1

"""In-memory stand-in for MetadataClient.

Activated when SALESFORCE_MOCK_MODE is truthy. Implements the methods used
by the report tools so they work without a real Salesforce org.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

from .errors import MetadataError


def _file_properties(full_name: str, metadata_type: str, namespace: Optional[str] = None) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "fullName": full_name,
        "fileName": f"reports/{full_name}.report"
        if metadata_type == "Report"
        else f"reports/{full_name}.reportFolder-meta.xml",
        "id": f"00O_MOCK_{full_name.replace('/', '_').replace(' ', '_').upper()}",
        "type": metadata_type,
        "createdByName": "Mock Admin",
        "lastModifiedByName": "Mock Admin",
        "manageableState": "unmanaged",
    }
    if namespace:
        entry["namespacePrefix"] = namespace
        entry["manageableState"] = "installed"
    return entry


class MockMetadataClient:
    """Serves a handful of static report folders and reports."""

    def __init__(self, connection: Any = None) -> None:
        self.connection = connection

        self._folders: List[Dict[str, Any]] = [
            _file_properties("Sales_Reports", "ReportFolder"),
            _file_properties("Service_Reports", "ReportFolder"),
        ]

        self._reports_by_folder: Dict[str, List[Dict[str, Any]]] = {
            "unfiled$public": [
                _file_properties("unfiled$public/Open_Opportunities", "Report"),
                _file_properties("unfiled$public/Leads_By_Source", "Report"),
            ],
            "Private Reports": [
                _file_properties("Private Reports/My_Pipeline", "Report"),
            ],
            "Sales_Reports": [
                _file_properties("Sales_Reports/Closed_Won_By_Quarter", "Report"),
                _file_properties("Sales_Reports/Forecast_Summary", "Report", namespace="acmefc"),
            ],
            "Service_Reports": [
                _file_properties("Service_Reports/Case_Backlog", "Report"),
            ],
        }

        self._report_metadata: Dict[str, Dict[str, Any]] = {
            "unfiled$public/Open_Opportunities": {
                "fullName": "unfiled$public/Open_Opportunities",
                "name": "Open Opportunities",
                "format": "Summary",
                "reportType": "Opportunity",
                "scope": "organization",
                "showDetails": "true",
                "columns": [
                    {"field": "OPPORTUNITY_NAME"},
                    {"field": "ACCOUNT_NAME"},
                    {"field": "AMOUNT", "aggregateTypes": "Sum"},
                    {"field": "CLOSE_DATE"},
                ],
                "filter": {
                    "criteriaItems": {
                        "column": "CLOSED",
                        "operator": "equals",
                        "value": "False",
                    }
                },
                "groupingsDown": {
                    "dateGranularity": "None",
                    "field": "STAGE_NAME",
                    "sortOrder": "Asc",
                },
                "chart": {
                    "chartType": "HorizontalBar",
                    "groupingColumn": "STAGE_NAME",
                    "location": "CHART_TOP",
                },
                "timeFrameFilter": {"dateColumn": "CLOSE_DATE", "interval": "INTERVAL_CURFY"},
            },
            "Sales_Reports/Closed_Won_By_Quarter": {
                "fullName": "Sales_Reports/Closed_Won_By_Quarter",
                "name": "Closed Won by Quarter",
                "format": "Matrix",
                "reportType": "Opportunity",
                "columns": [{"field": "AMOUNT", "aggregateTypes": "Sum"}],
                "groupingsDown": {"dateGranularity": "FiscalQuarter", "field": "CLOSE_DATE"},
                "groupingsAcross": {"field": "OWNER_FULL_NAME"},
            },
        }

    async def retrieve_metadata(self, metadata_type: str, full_name: str) -> Dict[str, Any]:
        if metadata_type != "Report" or full_name not in self._report_metadata:
            raise MetadataError(f"{metadata_type} '{full_name}' not found.")
        return copy.deepcopy(self._report_metadata[full_name])

    async def list_metadata(
        self,
        metadata_type: str,
        folder: Optional[str] = None,
    ) -> List[Optional[Dict[str, Any]]]:
        if metadata_type == "ReportFolder":
            return copy.deepcopy(self._folders)
        if metadata_type != "Report":
            return []
        if folder not in self._reports_by_folder:
            raise MetadataError(f"INVALID_FOLDER: Folder '{folder}' does not exist.")
        return copy.deepcopy(self._reports_by_folder[folder])

    async def list_report_folders(self) -> List[Optional[Dict[str, Any]]]:
        return await self.list_metadata("ReportFolder")
