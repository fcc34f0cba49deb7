# Copyright 2024-2025 pynlr authors. All rights reserved.
