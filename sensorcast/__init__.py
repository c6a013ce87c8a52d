"""SensorCast package.

English:
    Fit a lightweight seasonal ARIMA model to daily sensor summaries per
    (site, threshold type) group, pick the best order by AIC and produce
    leakage-free multi-step forecasts.

日本語:
    観測地点・閾値タイプごとの日次センサー系列に軽量な季節ARIMAを当てはめ、
    AICで最良の次数を選び、リークのない多段先予測を行うパッケージです。
"""

from .version import __version__
