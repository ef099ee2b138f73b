"""
DataCite JSON:API payload for a resource's descriptive metadata.
"""
from django.conf import settings


def build_attributes(resource, landing_page):
    attributes = {
        'doi': resource.doi,
        'titles': [{'title': resource.title}],
        'publisher': resource.publisher or settings.DATACITE_PUBLISHER,
        'types': {'resourceTypeGeneral': resource.resource_type},
        'url': landing_page.public_url,
        # Keep the DOI findable
        'event': 'publish',
    }
    if resource.publication_year:
        attributes['publicationYear'] = resource.publication_year
    if resource.description:
        attributes['descriptions'] = [
            {'description': resource.description, 'descriptionType': 'Abstract'}
        ]
    if resource.version:
        attributes['version'] = resource.version
    if resource.language:
        attributes['language'] = resource.language
    return attributes


def build_update_payload(resource, landing_page):
    return {
        'data': {
            'type': 'dois',
            'id': resource.doi,
            'attributes': build_attributes(resource, landing_page),
        }
    }
