"""
Analytics core: hour alignment, weather features, weighted price models, backtest.
"""

from .types import AggregateMetrics, FoldResult, ModelRun, PricePoint, SpotPricePoint, WeatherPoint  # noqa: F401
from .models import MODEL_WEIGHTS, ModelType, ModelWeights, resolve_model  # noqa: F401
from .forecast import ForecastConfig, generate_price_from_weather  # noqa: F401
from .backtest import BacktestConfig, perform_time_series_cv  # noqa: F401
from .metrics import compute_aggregate_metrics  # noqa: F401
from .horizon import predict_horizon  # noqa: F401
