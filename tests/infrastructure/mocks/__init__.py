from .simulator_mocks import MockDeviceController, MockKeyListener

__all__ = ["MockDeviceController", "MockKeyListener"]
