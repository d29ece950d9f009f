import logging

from Eduledger.data.normalize import SETTINGS_KEY

logger = logging.getLogger(__name__)


def get_settings(store):
	return store.get_settings()


def update_settings(store, settings):
	"""Replace the settings object as a whole."""
	with store.mutate() as data:
		data[SETTINGS_KEY] = dict(settings)
		data[SETTINGS_KEY].setdefault("onboardingStepsCompleted", [])
	return data[SETTINGS_KEY]


def complete_onboarding_step(store, step):
	"""Record an onboarding step once; repeated calls are harmless."""
	with store.mutate() as data:
		steps = data[SETTINGS_KEY]["onboardingStepsCompleted"]
		if step not in steps:
			steps.append(step)
	return steps
