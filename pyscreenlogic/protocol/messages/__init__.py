from .connection_messages import (ChallengeRequest, ChallengeResponse, LoginRequest, LoginResponse,
                                  VersionRequest, VersionResponse)
from .controller_config_message import (CircuitColor, ControllerCircuit, ControllerConfigurationRequest,
                                        ControllerConfigurationResponse, SetPointRange)
from .discovery_message import DISCOVERY_REQUEST, DiscoveryResponse
from .heat_messages import SetHeatModeRequest, SetHeatModeResponse, SetHeatPointRequest, SetHeatPointResponse
from .history_messages import HistoryDataResponse, HistoryEvent, HistoryRequest, HistoryResponse
from .pool_status_message import (BodyOfWaterStatus, Chemistry, CircuitStatus, PoolStatusRequest,
                                  PoolStatusResponse)
from .screenlogic_message import ScreenLogicMessage, ScreenLogicResponse

__all__ = [
        "BodyOfWaterStatus",
        "ChallengeRequest",
        "ChallengeResponse",
        "Chemistry",
        "CircuitColor",
        "CircuitStatus",
        "ControllerCircuit",
        "ControllerConfigurationRequest",
        "ControllerConfigurationResponse",
        "DISCOVERY_REQUEST",
        "DiscoveryResponse",
        "HistoryDataResponse",
        "HistoryEvent",
        "HistoryRequest",
        "HistoryResponse",
        "LoginRequest",
        "LoginResponse",
        "PoolStatusRequest",
        "PoolStatusResponse",
        "ScreenLogicMessage",
        "ScreenLogicResponse",
        "SetHeatModeRequest",
        "SetHeatModeResponse",
        "SetHeatPointRequest",
        "SetHeatPointResponse",
        "SetPointRange",
        "VersionRequest",
        "VersionResponse",
    ]
