# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.
