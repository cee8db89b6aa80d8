from models.incident import Impact, Incident, IncidentEvent, IncidentsResponse, StatusPage

__all__ = ["Impact", "Incident", "IncidentEvent", "IncidentsResponse", "StatusPage"]
