"""
Forecasting for indicator series: least-squares projection of the next reporting periods from historical numeric submissions.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""


from engine.forecast.projection import ForecastPoint, forecast

__all__ = ["ForecastPoint", "forecast"]
