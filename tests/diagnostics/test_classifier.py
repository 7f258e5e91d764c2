from unittest import TestCase

from bcmanager.diagnostics.classifier import (NetworkErrorClassifier, classify, extract_error_code, extract_ports,
                                              extract_message, strip_log_prefix)
from bcmanager.diagnostics.data import ErrorType, Severity, SuggestionAction
from bcmanager.diagnostics.suggestions import RemediationScripts


class TestHelpers(TestCase):

    def test_strip_log_prefix(self):
        self.assertEqual(strip_log_prefix('[ERROR] port already exists'), 'port already exists')
        self.assertEqual(strip_log_prefix('  [10:00:01] [WARN]  HNS failure '), 'HNS failure')
        self.assertEqual(strip_log_prefix('no tags [here]'), 'no tags [here]')

    def test_extract_error_code(self):
        self.assertEqual(extract_error_code('failed (0x803b0013)'), '0x803b0013')
        self.assertEqual(extract_error_code('FAILED 0X803B0013'), '0x803b0013')
        self.assertIsNone(extract_error_code('failed 0x803b'), 'Codes have exactly eight hex digits')
        self.assertIsNone(extract_error_code('failed 0x803b00131'))
        self.assertIsNone(extract_error_code('network port error failed'))

    def test_extract_ports(self):
        self.assertEqual(extract_ports('port 8080 and port 8443, again 8080'), (8080, 8443))
        self.assertEqual(extract_ports('port 80 and 10000 and 7999'), ())
        self.assertEqual(extract_ports('port 8000 and 9999'), (8000, 9999), 'Range bounds are inclusive')
        self.assertEqual(extract_ports('code 0x80088080'), (), 'Hex codes are not ports')
        self.assertEqual(extract_ports('port 7070', range(7000, 7100)), (7070,))
        self.assertEqual(extract_ports('checksum ' + '7' * 5000 + ' port 8080'), (8080,),
                         'Long digit runs are not ports')

    def test_extract_message(self):
        self.assertEqual(extract_message('[ERROR] port already exists'), 'port already exists')
        self.assertEqual(extract_message('[ERROR]'), 'Deployment failed')
        self.assertEqual(extract_message(''), 'Deployment failed')


class TestNetworkErrorClassifier(TestCase):

    def test_no_failure(self):
        self.assertIsNone(classify([]))
        self.assertIsNone(classify(['', '   ']))
        self.assertIsNone(classify(['all good', 'container started']))
        self.assertIsNone(classify(''))

    def test_port_conflict(self):
        diagnosis = classify(['[ERROR] port already exists (0x803b0013)'])

        self.assertEqual(diagnosis.type, ErrorType.PORT_CONFLICT)
        self.assertEqual(diagnosis.severity, Severity.CRITICAL)
        self.assertEqual(diagnosis.error_code, '0x803b0013')
        self.assertEqual(diagnosis.message, 'port already exists (0x803b0013)')
        self.assertEqual(diagnosis.affected_ports, ())
        self.assertEqual(diagnosis.suggestions[0].action, SuggestionAction.RUN_DIAGNOSTICS)

    def test_port_needs_whole_word(self):
        for line in ['[WARN] Report already exists, skipping', 'Export already exists']:
            self.assertIsNone(classify([line]), line)

    def test_port_conflict_uppercase(self):
        diagnosis = classify(['PORT ALREADY EXISTS (0X803B0013)'])
        self.assertEqual(diagnosis.type, ErrorType.PORT_CONFLICT)
        self.assertEqual(diagnosis.error_code, '0x803b0013')

    def test_affected_ports(self):
        diagnosis = classify(['[10:00:01] [ERROR] Failed to bind port 8080: port already exists (0x803b0013)'])
        self.assertEqual(diagnosis.affected_ports, (8080,))

        diagnosis = classify(['HNS failed: port already exists (0x803b0013) - port 8080 is in use',
                              'port 80 is blocked'])
        self.assertEqual(diagnosis.affected_ports, (8080,), 'Ports outside the band are ignored')

        diagnosis = classify(['Publishing port 8080',
                              'Publishing port 8443',
                              '[ERROR] port already exists'])
        self.assertEqual(diagnosis.affected_ports, (8080, 8443),
                         'Ports are collected over the whole output, in order')
        self.assertIsNone(diagnosis.error_code)

    def test_custom_port_range(self):
        classifier = NetworkErrorClassifier(port_range=range(7000, 7100))
        diagnosis = classifier.classify(['port 7049 and 8080: port already exists'])
        self.assertEqual(diagnosis.affected_ports, (7049,))

    def test_first_signature_wins(self):
        diagnosis = classify(['network error - port already exists'])
        self.assertEqual(diagnosis.type, ErrorType.PORT_CONFLICT)

        diagnosis = classify(['[ERROR] failed to configure network',
                              '[ERROR] HNS failed: port already exists'])
        self.assertEqual(diagnosis.type, ErrorType.PORT_CONFLICT,
                         'The signature order decides, not the line order')
        self.assertEqual(diagnosis.message, 'HNS failed: port already exists')

    def test_endpoint_creation_failure(self):
        for line in ['failed to create endpoint bc-web on network nat: HNS failed with error',
                     'Error response from daemon: failed to create network endpoint']:
            diagnosis = classify([line])
            self.assertEqual(diagnosis.type, ErrorType.ENDPOINT_CREATION_FAILURE, line)
            self.assertEqual(diagnosis.severity, Severity.CRITICAL)

    def test_nat_mapping_conflict(self):
        diagnosis = classify(['[ERROR] NAT static mapping already exists for port 8080'])
        self.assertEqual(diagnosis.type, ErrorType.NAT_MAPPING_CONFLICT)
        self.assertEqual(diagnosis.severity, Severity.CRITICAL)
        self.assertEqual(diagnosis.affected_ports, (8080,))

    def test_service_failure(self):
        for line in ['The host network service is not running',
                     'HNS service failure',
                     'hns is not running',
                     'Cannot connect to Docker daemon',
                     'Is the docker daemon running?',
                     'Docker Desktop is not running']:
            diagnosis = classify([line])
            self.assertEqual(diagnosis.type, ErrorType.SERVICE_FAILURE, line)
            self.assertEqual(diagnosis.severity, Severity.CRITICAL)

    def test_unknown_network_failure(self):
        diagnosis = classify(['[INFO] pulling image', '[ERROR] Failed to configure network for container'])

        self.assertEqual(diagnosis.type, ErrorType.UNKNOWN_NETWORK_FAILURE)
        self.assertEqual(diagnosis.severity, Severity.WARNING)
        self.assertEqual(diagnosis.message, 'Failed to configure network for container')
        self.assertEqual([s.action for s in diagnosis.suggestions], [SuggestionAction.RUN_DIAGNOSTICS])

    def test_unknown_needs_failure_and_network_on_the_same_line(self):
        self.assertIsNone(classify(['[ERROR] image pull failed', '[INFO] network ready']))
        self.assertIsNone(classify(['report exceptions']), 'Network words are whole words')
        for line in ['[ERROR] Native module failed to load', 'National holiday export failed',
                     'portal error', 'Portuguese translation failed']:
            self.assertIsNone(classify([line]), line)

        diagnosis = classify(['[ERROR] networking stack failure on ports'])
        self.assertEqual(diagnosis.type, ErrorType.UNKNOWN_NETWORK_FAILURE)

        diagnosis = classify(['network port error failed'])
        self.assertEqual(diagnosis.type, ErrorType.UNKNOWN_NETWORK_FAILURE)
        self.assertIsNone(diagnosis.error_code)

    def test_message_excludes_other_lines(self):
        diagnosis = classify(['[DEBUG] checking ports', '[ERROR] port already exists', '[DEBUG] cleanup'])
        self.assertEqual(diagnosis.message, 'port already exists')
        self.assertNotIn('DEBUG', diagnosis.message)

    def test_error_code_from_matched_line(self):
        diagnosis = classify(['previous run failed with 0x80070005', '[ERROR] port already exists'])
        self.assertIsNone(diagnosis.error_code)

    def test_string_input(self):
        diagnosis = classify('[INFO] starting\n[ERROR] port already exists (0x803b0013)\n')
        self.assertEqual(diagnosis.type, ErrorType.PORT_CONFLICT)
        self.assertEqual(diagnosis.error_code, '0x803b0013')

    def test_deterministic(self):
        lines = ['Publishing port 8080', '[ERROR] port already exists (0x803b0013)']
        self.assertEqual(classify(lines), classify(list(lines)))

    def test_custom_scripts(self):
        classifier = NetworkErrorClassifier(scripts=RemediationScripts(scripts_directory='/opt/bc'))
        diagnosis = classifier.classify(['port already exists'])
        self.assertEqual(diagnosis.suggestions[0].script_reference, '/opt/bc/Diagnose-HNS-Ports.ps1')

    def test_json_dump(self):
        dumped = classify(['[ERROR] port 8080: port already exists (0x803b0013)']).model_dump(by_alias=True)
        self.assertEqual(dumped['type'], 'port_conflict')
        self.assertEqual(dumped['errorCode'], '0x803b0013')
        self.assertEqual(dumped['affectedPorts'], (8080,))
        self.assertIn('scriptReference', dumped['suggestions'][0])

    def test_long_digit_run(self):
        diagnosis = classify(['[ERROR] port already exists', 'checksum ' + '7' * 5000])
        self.assertEqual(diagnosis.type, ErrorType.PORT_CONFLICT)
        self.assertEqual(diagnosis.affected_ports, ())
