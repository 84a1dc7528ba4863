# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Configuration management for the schemacast engine."""

import os
import logging
from dataclasses import dataclass

from .utils.logging_utils import configure_split_stream_logging


@dataclass
class EngineConfig:
    """Configuration class for validate/cast calls and the loaders around them."""
    max_depth: int = 64
    log_level: str = "WARNING"
    print_level: str = "WARNING"
    cache_enabled: bool = True

    @classmethod
    def from_env(cls) -> 'EngineConfig':
        """Create configuration from environment variables."""
        return cls(
            max_depth=int(os.getenv('SCHEMACAST_MAX_DEPTH', '64')),
            log_level=os.getenv('SCHEMACAST_LOG_LEVEL', 'WARNING'),
            print_level=os.getenv('SCHEMACAST_PRINT_LEVEL', 'WARNING'),
            cache_enabled=os.getenv('SCHEMACAST_CACHE_ENABLED', 'true').lower() == 'true',
        )

    def set_logging(self) -> logging.Logger:
        """Setup logging based on configuration."""
        level = getattr(logging, self.log_level.upper(), logging.WARNING)
        stderr_level = getattr(logging, self.print_level.upper(), logging.WARNING)

        formatter = logging.Formatter('%(name)s - %(levelname)s - %(message)s')
        return configure_split_stream_logging(level=level, stderr_level=stderr_level, formatter=formatter)


# Global configuration instance
engine_config = EngineConfig.from_env()
